import logging

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ipractice.core.errors import ClientNotFoundError, CommentWriteError
from ipractice.models.client import Appointment, Client

logger = logging.getLogger(__name__)


class ClientRepository:
    """Persistence gateway for the client aggregate."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_all(self) -> list[Client]:
        return self.session.query(Client).order_by(Client.id.asc()).all()

    def get_by_id(self, client_id: int) -> Client | None:
        return self.session.query(Client).filter(Client.id == client_id).first()

    def get(self, client_id: int) -> Client:
        client = self.get_by_id(client_id)
        if client is None:
            raise ClientNotFoundError(client_id)
        return client

    def get_by_name(self, name: str) -> Client | None:
        return (
            self.session.query(Client)
            .filter(Client.name == name)
            .order_by(Client.id.asc())
            .first()
        )

    def get_many_by_ids(self, client_ids: list[int]) -> list[Client]:
        if not client_ids:
            return []
        return (
            self.session.query(Client)
            .filter(Client.id.in_(client_ids))
            .order_by(Client.id.asc())
            .all()
        )

    def add(self, client: Client) -> Client:
        self.session.add(client)
        self.session.flush()
        return client

    def delete(self, client: Client) -> None:
        self.session.delete(client)
        self.session.flush()

    def save(self) -> None:
        self.session.flush()

    def log_appointment_comment(self, client_id: int, appointment_id: str, comment: str) -> None:
        """Write a booking comment onto the client's stored appointment.

        The appointment must already be flushed. Errors are logged and re-raised.
        """
        statement = (
            update(Appointment)
            .where(Appointment.client_id == client_id, Appointment.id == appointment_id)
            .values(comment=comment)
            .execution_options(synchronize_session="evaluate")
        )

        try:
            result = self.session.execute(statement)
        except SQLAlchemyError:
            logger.exception(
                'Failed to store comment for appointment %s of client %s', appointment_id, client_id
            )
            raise

        if result.rowcount == 0:
            logger.error('No appointment %s found for client %s while storing comment', appointment_id, client_id)
            raise CommentWriteError(client_id, appointment_id)
