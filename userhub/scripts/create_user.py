"""
Create a user (e.g. the first admin; public signup only creates 'user' accounts). Run from project root:
  python -m userhub.scripts.create_user NAME EMAIL PASSWORD [role]
Example:
  python -m userhub.scripts.create_user "Site Admin" admin@example.com your-secure-password admin
"""
import argparse
import sys

from pydantic import ValidationError

from userhub.core.database import SessionLocal
from userhub.schemas.auth import SignUpRequest
from userhub.schemas.users import Role
from userhub.services.auth import create_user
from userhub.services.users import EmailAlreadyExistsError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Userhub user from the command line.")
    parser.add_argument("name", help="Display name (2-255 chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (6-128 chars)")
    parser.add_argument("role", nargs="?", default="user", choices=[r.value for r in Role])
    args = parser.parse_args(argv)

    try:
        body = SignUpRequest(name=args.name, email=args.email, password=args.password)
    except ValidationError as e:
        for err in e.errors():
            field = ".".join(str(p) for p in err["loc"])
            print(f"{field}: {err['msg']}", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        user = create_user(
            db,
            name=body.name,
            email=body.email,
            password=body.password,
            role=Role(args.role),
        )
    except EmailAlreadyExistsError:
        print(f"User '{body.email}' already exists.", file=sys.stderr)
        return 1
    finally:
        db.close()

    print(f"Created user '{user.email}' (id={user.id}) with role '{user.role.value}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
