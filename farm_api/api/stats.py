"""
Group-by helpers for the /stats endpoints.

Every aggregate is computed inside the caller's tenant.
"""
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session


def _number(value: Any) -> float:
    return float(value) if value is not None else 0.0


def totals(db: Session, model, tenant_id: int, conditions: Sequence = (),
           sum_column=None) -> Dict[str, float]:
    """Row count plus sum and average of `sum_column`."""
    columns = [func.count(model.id)]
    if sum_column is not None:
        columns += [func.sum(sum_column), func.avg(sum_column)]

    row = db.query(*columns).filter(model.tenant_id == tenant_id, *conditions).one()
    result = {"registros": row[0]}
    if sum_column is not None:
        result["suma"] = _number(row[1])
        result["promedio"] = _number(row[2])
    return result


def group_counts(db: Session, model, tenant_id: int, group_column, conditions: Sequence = (),
                 sum_column=None, order: str = "value", limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """
    Rows grouped by `group_column` with a count and, optionally, a sum.

    order="value" sorts by the sum (or the count) descending, order="key"
    sorts by the grouping column ascending. Null keys are skipped.
    """
    count = func.count(model.id)
    columns = [group_column, count]
    total = None
    if sum_column is not None:
        total = func.coalesce(func.sum(sum_column), 0)
        columns.append(total)

    query = (
        db.query(*columns)
        .filter(model.tenant_id == tenant_id, group_column.isnot(None), *conditions)
        .group_by(group_column)
    )
    if order == "key":
        query = query.order_by(group_column.asc())
    else:
        query = query.order_by((total if total is not None else count).desc())
    if limit:
        query = query.limit(limit)

    key = group_column.key
    rows = []
    for row in query.all():
        item = {key: row[0], "cantidad": row[1]}
        if total is not None:
            item["total"] = _number(row[2])
        rows.append(item)
    return rows
