# ipv/modules/bills/repository.py
from sqlalchemy.orm import Session
from typing import Dict, Mapping
import logging

from ipv.shared.database.models import BillCount

logger = logging.getLogger(__name__)

class BillsRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_counts(self, ipv_id: int, user_id: int) -> Dict[int, int]:
        rows = self.db.query(BillCount).filter(
            BillCount.ipv_id == ipv_id,
            BillCount.user_id == user_id
        ).all()
        return {row.denomination: row.count for row in rows}

    def save_counts(self, ipv_id: int, user_id: int, counts: Mapping[int, int]) -> None:
        """Upsert por (ipv, usuario, denominación)"""
        existing = {
            row.denomination: row
            for row in self.db.query(BillCount).filter(
                BillCount.ipv_id == ipv_id,
                BillCount.user_id == user_id
            ).all()
        }

        for denomination, count in counts.items():
            row = existing.get(denomination)
            if row is None:
                self.db.add(BillCount(
                    ipv_id=ipv_id,
                    user_id=user_id,
                    denomination=denomination,
                    count=count
                ))
            else:
                row.count = count

        try:
            self.db.commit()
        except Exception:
            logger.exception(f"Error guardando conteo de billetes del IPV {ipv_id}")
            self.db.rollback()
            raise

    def clear_counts(self, ipv_id: int, user_id: int) -> int:
        deleted = self.db.query(BillCount).filter(
            BillCount.ipv_id == ipv_id,
            BillCount.user_id == user_id
        ).delete(synchronize_session=False)
        self.db.commit()
        return deleted
