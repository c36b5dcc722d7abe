"""
Registry of remote procedures.

Maps the public procedure names used on the wire to their kind and to
the ``UserService`` method implementing them.  Queries are read-only
and served over GET; mutations change state and are served over POST.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from user_rpc_api.app.core.result import Result
from user_rpc_api.app.services.user_service import UserService


QUERY = "query"
MUTATION = "mutation"


@dataclass(frozen=True)
class Procedure:
    name: str
    kind: str
    handler: Callable[[UserService, Any], Result]

    def __call__(self, service: UserService, raw_input: Any) -> Result:
        return self.handler(service, raw_input)


PROCEDURES: Dict[str, Procedure] = {
    procedure.name: procedure
    for procedure in (
        Procedure("getUsers", QUERY, UserService.get_users),
        Procedure("getUserById", QUERY, UserService.get_user_by_id),
        Procedure("createUser", MUTATION, UserService.create_user),
        Procedure("deleteUser", MUTATION, UserService.delete_user),
    )
}


def resolve(name: str) -> Optional[Procedure]:
    return PROCEDURES.get(name)
