from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session as DBSession

from taskdesk.db import Base


class RecordRepository:
    """CRUD over one record table. Takes and returns plain dicts."""

    def __init__(self, db: DBSession, model: type[Base]):
        self.db = db
        self.model = model

    def create(self, record: dict) -> dict:
        # ids are assigned by the database
        values = {k: v for k, v in record.items() if k != "id"}
        row = self.model(**values)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return self._to_dict(row)

    def find_all(self, **filters) -> list[dict]:
        query = self.db.query(self.model)
        if filters:
            query = query.filter_by(**filters)
        return [self._to_dict(row) for row in query.order_by(self.model.id).all()]

    def get(self, record_id: int) -> Optional[dict]:
        row = self.db.get(self.model, record_id)
        return self._to_dict(row) if row else None

    def exists(self, record_id: int) -> bool:
        return self.db.get(self.model, record_id) is not None

    def update(self, record_id: int, record: dict) -> Optional[dict]:
        """Overwrite the supplied fields; returns None when the row is missing."""
        row = self.db.get(self.model, record_id)
        if row is None:
            return None
        for key, value in record.items():
            if key != "id":
                setattr(row, key, value)
        self.db.commit()
        self.db.refresh(row)
        return self._to_dict(row)

    def delete(self, record_id: int) -> bool:
        row = self.db.get(self.model, record_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.commit()
        return True

    def _to_dict(self, row) -> dict:
        data = {}
        for column in self.model.__table__.columns:
            value = getattr(row, column.name)
            data[column.name] = value.isoformat() if isinstance(value, datetime) else value
        return data
