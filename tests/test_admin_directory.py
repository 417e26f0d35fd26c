from unittest.mock import patch

import pytest

from tastehub.models.user import User
from tastehub.services.admin_directory import UserDirectory, primary_admin
from tastehub.services.chat_service import send_message


@pytest.mark.asyncio
async def test_resolves_admins_oldest_first(admins):
    directory = UserDirectory(fallback_email="fallback@x.com")

    emails = await directory.admin_emails()
    assert emails == ["admin@x.com", "admin2@x.com"]
    assert primary_admin(emails) == "admin@x.com"


@pytest.mark.asyncio
async def test_role_changes_apply_on_next_call(admins):
    directory = UserDirectory(fallback_email="fallback@x.com")
    assert "cust@x.com" not in await directory.admin_emails()

    await User.filter(email="cust@x.com").update(role="admin")
    assert "cust@x.com" in await directory.admin_emails()


@pytest.mark.asyncio
async def test_empty_directory_falls_back(db):
    directory = UserDirectory(fallback_email="fallback@x.com")
    assert await directory.admin_emails() == ["fallback@x.com"]


@pytest.mark.asyncio
async def test_lookup_failure_falls_back(db):
    directory = UserDirectory(fallback_email="fallback@x.com")
    with patch.object(User, "filter", side_effect=RuntimeError("directory offline")):
        assert await directory.admin_emails() == ["fallback@x.com"]


@pytest.mark.asyncio
async def test_customer_message_reaches_fallback_when_directory_fails(db):
    directory = UserDirectory(fallback_email="fallback@x.com")
    with patch.object(User, "filter", side_effect=RuntimeError("directory offline")):
        message = await send_message("cust@x.com", "Customer", "anyone there?", directory)

    assert message.receiver_email == "fallback@x.com"
