#app/crud/query.py
"""
Интерпретатор list-запросов: where / sort / select / skip / limit / count
над одной коллекцией. Значения query-параметров передаются как JSON.
"""
import json
from typing import Any, Dict, Mapping

from sqlalchemy.orm import Query, Session

from app.core.exceptions import QueryParamsError, ValidationError

_OPERATORS = {
    "$eq": lambda column, value: column == value,
    "$ne": lambda column, value: column != value,
    "$gt": lambda column, value: column > value,
    "$gte": lambda column, value: column >= value,
    "$lt": lambda column, value: column < value,
    "$lte": lambda column, value: column <= value,
    "$in": lambda column, value: column.in_(_as_list(value)),
    "$nin": lambda column, value: column.not_in(_as_list(value)),
}


_SCALARS = (str, int, float, bool, type(None))


def _scalar(value: Any) -> Any:
    if not isinstance(value, _SCALARS):
        raise ValidationError(f"Condition value must be a scalar, got {value!r}")
    return value


def _as_list(value: Any) -> list:
    if not isinstance(value, list):
        raise ValidationError(f"Operator expects a list, got {value!r}")
    return [_scalar(item) for item in value]


def parse_params(raw: Mapping[str, str]) -> Dict[str, Any]:
    """
    JSON-декодирует каждое значение query-строки.
    """
    result = {}
    for key, value in raw.items():
        try:
            result[key] = json.loads(value)
        except (TypeError, ValueError) as e:
            raise QueryParamsError(str(e))
    return result


def _column(model, field: str):
    columns = model.__table__.columns
    if field not in columns:
        raise ValidationError(f"Unknown field for {model.__name__}: {field}")
    return getattr(model, field)


def build_list_query(db: Session, model, params: Dict[str, Any]) -> Query:
    """
    Строит запрос по where/sort/skip/limit. select и count применяются вызывающей стороной.
    """
    query = db.query(model)

    where = params.get("where") or {}
    if not isinstance(where, dict):
        raise ValidationError("'where' must be a JSON object")
    for field, condition in where.items():
        column = _column(model, field)
        if isinstance(condition, dict) and condition and all(k.startswith("$") for k in condition):
            for op, value in condition.items():
                if op not in _OPERATORS:
                    raise ValidationError(f"Unsupported operator: {op}")
                if op not in ("$in", "$nin"):
                    value = _scalar(value)
                query = query.filter(_OPERATORS[op](column, value))
        else:
            query = query.filter(column == _scalar(condition))

    sort = params.get("sort") or {}
    if not isinstance(sort, dict):
        raise ValidationError("'sort' must be a JSON object")
    for field, direction in sort.items():
        column = _column(model, field)
        query = query.order_by(column.desc() if direction in (-1, "desc", "descending") else column.asc())
    if not sort:
        query = query.order_by(model.id.asc())

    if "skip" in params:
        query = query.offset(_non_negative_int(params["skip"], "skip"))
    if "limit" in params:
        query = query.limit(_non_negative_int(params["limit"], "limit"))
    return query


def _non_negative_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"'{name}' must be a non-negative integer")
    return value


def apply_select(record: Dict[str, Any], select: Any) -> Dict[str, Any]:
    """
    Проекция в стиле Mongo: {"name": 1} оставляет только указанные поля (+id),
    {"description": 0} убирает указанные.
    """
    if not select:
        return record
    if not isinstance(select, dict):
        raise ValidationError("'select' must be a JSON object")
    included = {field for field, flag in select.items() if flag}
    excluded = {field for field, flag in select.items() if not flag}
    if included:
        keep = included | ({"id"} if "id" not in excluded else set())
        return {k: v for k, v in record.items() if k in keep}
    return {k: v for k, v in record.items() if k not in excluded}
