# app/utils/pagination.py
"""Offset pagination over SQLAlchemy queries, shaped as {data, total, page, limit, totalPages}."""

import math
from sqlalchemy.orm import Query


def paginate(query: Query, page: int, limit: int) -> dict:
    page = max(page, 1)
    limit = max(limit, 1)
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return {
        "data": items,
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": math.ceil(total / limit) if total else 0,
    }
