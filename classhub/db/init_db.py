from classhub.db.base_class import Base
from classhub.db.session import engine

# import models so SQLAlchemy registers them
from classhub.models import assignment, attachment, classroom, comment, enrollment, submission, user  # noqa: F401


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
