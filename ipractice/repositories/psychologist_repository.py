from sqlalchemy.orm import Session

from ipractice.core.errors import PsychologistNotFoundError
from ipractice.models.psychologist import Psychologist


class PsychologistRepository:
    """Persistence gateway for the psychologist aggregate."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_all(self) -> list[Psychologist]:
        return self.session.query(Psychologist).order_by(Psychologist.id.asc()).all()

    def get_by_id(self, psychologist_id: int) -> Psychologist | None:
        return self.session.query(Psychologist).filter(Psychologist.id == psychologist_id).first()

    def get(self, psychologist_id: int) -> Psychologist:
        psychologist = self.get_by_id(psychologist_id)
        if psychologist is None:
            raise PsychologistNotFoundError(psychologist_id)
        return psychologist

    def get_by_name(self, name: str) -> Psychologist | None:
        return (
            self.session.query(Psychologist)
            .filter(Psychologist.name == name)
            .order_by(Psychologist.id.asc())
            .first()
        )

    def get_many_by_ids(self, psychologist_ids: list[int]) -> list[Psychologist]:
        if not psychologist_ids:
            return []
        return (
            self.session.query(Psychologist)
            .filter(Psychologist.id.in_(psychologist_ids))
            .order_by(Psychologist.id.asc())
            .all()
        )

    def add(self, psychologist: Psychologist) -> Psychologist:
        self.session.add(psychologist)
        self.session.flush()
        return psychologist

    def delete(self, psychologist: Psychologist) -> None:
        self.session.delete(psychologist)
        self.session.flush()

    def save(self) -> None:
        self.session.flush()
