"""
project: Delve
module: score.py
License: MIT

Persisted best-depth record.

One row per score key. The engine only ever reads the stored depth at
construction and writes it back when a run goes deeper.
"""

from __future__ import annotations

from datetime import datetime

from delve import db


class BestScore(db.Model):
    __tablename__ = "best_score"

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(80), unique=True, nullable=False)
    depth = db.Column(db.Integer, nullable=False, default=0)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    @staticmethod
    def get(key: str) -> int:
        row = BestScore.query.filter_by(key=key).first()
        return row.depth if row else 0

    @staticmethod
    def set(key: str, depth: int):
        row = BestScore.query.filter_by(key=key).first()
        if not row:
            row = BestScore(key=key, depth=depth)
            db.session.add(row)
        else:
            row.depth = depth
        db.session.commit()

    def to_dict(self):  # pragma: no cover - thin serializer
        return {"key": self.key, "depth": self.depth, "updated_at": self.updated_at.isoformat()}


__all__ = ["BestScore"]
