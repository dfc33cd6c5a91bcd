"""FastAPI dependencies shared by the credential routes.

get_credential_repo picks the registry backend per request: the
module-level in-memory registry when no DATABASE_URL is configured,
otherwise a PostgreSQL repo bound to a request-scoped session.

get_validator returns the process-wide validator.  Tests replace it
through app.dependency_overrides to pin the jitter.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

from credchain.core.config import SETTINGS
from credchain.db import engine as db_engine
from credchain.repos.credential_repo import CredentialRepo, InMemoryCredentialRepo
from credchain.repos.pg_credential_repo import PgCredentialRepo
from credchain.services.validator import DocumentValidator, no_delay

credential_repo = InMemoryCredentialRepo(
    strict_verification=SETTINGS.strict_chain_verification
)

validator = DocumentValidator(
    processing_delay=None if SETTINGS.simulate_validation_delay else no_delay,
)


async def get_credential_repo() -> AsyncGenerator[CredentialRepo, None]:
    if db_engine.async_session_factory is None:
        yield credential_repo
        return

    async with db_engine.session_scope() as session:
        yield PgCredentialRepo(
            session, strict_verification=SETTINGS.strict_chain_verification
        )


def get_validator() -> DocumentValidator:
    return validator
