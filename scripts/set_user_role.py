# scripts/set_user_role.py

"""
이메일로 사용자를 찾아 역할(user, curator, admin)을 변경하는 관리 스크립트입니다.
사용자는 최소 한 번 Google로 로그인해 계정이 생성되어 있어야 합니다.

    python -m scripts.set_user_role --email someone@example.com --role admin
"""

import asyncio
from typing import Optional

import typer
from sqlmodel.ext.asyncio.session import AsyncSession

from tapcellar.core.database import init_db, close_db, get_async_session_context
from tapcellar.domains.usr import crud as usr_crud
from tapcellar.domains.usr.models import User, UserRole

cli = typer.Typer()


async def set_user_role(db: AsyncSession, email: str, role: UserRole) -> Optional[User]:
    """
    이메일에 해당하는 사용자의 역할을 변경합니다. 사용자가 없으면 None을 반환합니다.
    """
    db_user = await usr_crud.user.get_by_email(db, email=email)
    if db_user is None:
        return None
    return await usr_crud.user.set_role(db, db_obj=db_user, role=role)


@cli.command()
def main(
    email: str = typer.Option(
        ..., '--email', '-e',
        prompt="사용자 이메일을 입력하세요",
        help="역할을 변경할 사용자의 이메일 주소입니다."
    ),
    role: UserRole = typer.Option(
        UserRole.ADMIN, '--role', '-r',
        help="부여할 역할 (user, curator, admin)"
    ),
):
    """
    TapCellar 사용자의 역할을 변경합니다.
    """
    async def run() -> Optional[User]:
        await init_db()
        try:
            async with get_async_session_context() as db:
                return await set_user_role(db, email=email, role=role)
        finally:
            await close_db()

    updated = asyncio.run(run())
    if updated is None:
        typer.echo(f"오류: 해당 이메일의 사용자가 없습니다: {email}")
        raise typer.Exit(code=1)
    typer.echo(f"{updated.email} 사용자의 역할이 '{updated.role.value}'(으)로 변경되었습니다.")


if __name__ == "__main__":
    cli()
