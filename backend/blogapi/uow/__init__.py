from blogapi.uow.base import UnitOfWork
from blogapi.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

__all__ = ["UnitOfWork", "SQLAlchemyUnitOfWork"]
