from datetime import datetime

from sqlalchemy import DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from cli_metrics.core.database import Base


class LogItem(Base):
    """One event report sent by the CLI tool.

    SQLite INTEGER columns are 64-bit, so plain ``Integer`` covers the
    id, result code and client timestamp.
    """

    __tablename__ = 'logs'
    __table_args__ = {'sqlite_autoincrement': True}

    id: Mapped[int] = mapped_column('ID', Integer, primary_key=True)
    client_timestamp: Mapped[int] = mapped_column('clientTimestamp', Integer, default=0)
    result_code: Mapped[int] = mapped_column('resultCode', Integer)
    machine_id: Mapped[str] = mapped_column('machineId', Text, default='')
    info: Mapped[str] = mapped_column('info', Text, default='')
    inserted_at: Mapped[datetime] = mapped_column('insertedDatetime', DateTime(timezone=True))

    def __repr__(self) -> str:
        return f'<LogItem id={self.id} result_code={self.result_code}>'
