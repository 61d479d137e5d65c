from typing import List, Optional

from sqlmodel import Session, select

from court_lottery.models.time_slot import TimeSlot


class TimeSlotRepository:
    def __init__(self, session: Session):
        self.session = session

    def list_for_day(self, day_of_week: int) -> List[TimeSlot]:
        return list(
            self.session.exec(
                select(TimeSlot).where(TimeSlot.day_of_week == day_of_week).order_by(TimeSlot.start_time)
            ).all()
        )

    def find_template(self, day_of_week: int, key: str) -> Optional[TimeSlot]:
        """Template for a weekday whose start time formats to ``key``."""
        for slot in self.list_for_day(day_of_week):
            if slot.key == key:
                return slot
        return None
