"""
Edge-access allow-list synchronization.

Keeps the Cloudflare Access group that fronts the application in step with
the staff whitelist. The HTTP client is built explicitly and passed in, so
callers and tests decide which account/group (or fake) is used.
"""

import logging

import requests
from django.conf import settings
from django.contrib.auth import get_user_model

from apps.accounts.models import ADMIN_ROLES
from .exceptions import (
    AccessSyncError,
    InsufficientPermissionsError,
    InvalidInviteRequestError,
)

User = get_user_model()
logger = logging.getLogger(__name__)

SYNC_ACTIONS = ('add', 'remove')


class CloudflareAccessClient:
    """
    Minimal client for one Cloudflare Access group.

    Example:
        client = CloudflareAccessClient.from_settings()
        group = client.get_group()
        client.put_group({...})
    """

    def __init__(self, account_id, group_id, api_token, api_base, timeout=10, session=None):
        self.url = f"{api_base.rstrip('/')}/accounts/{account_id}/access/groups/{group_id}"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            'Authorization': f'Bearer {api_token}',
            'Content-Type': 'application/json',
        }

    @classmethod
    def from_settings(cls):
        return cls(
            account_id=settings.CLOUDFLARE_ACCOUNT_ID,
            group_id=settings.CLOUDFLARE_GROUP_ID,
            api_token=settings.CLOUDFLARE_API_TOKEN,
            api_base=settings.CLOUDFLARE_API_BASE,
            timeout=settings.CLOUDFLARE_TIMEOUT,
        )

    def get_group(self) -> dict:
        try:
            response = self.session.get(self.url, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise AccessSyncError(f"Failed to fetch Cloudflare group: {e}") from e
        if not response.ok:
            raise AccessSyncError("Failed to fetch Cloudflare group")
        return response.json()['result']

    def put_group(self, payload: dict) -> None:
        try:
            response = self.session.put(
                self.url, json=payload, headers=self.headers, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise AccessSyncError(f"Failed to update Cloudflare: {e}") from e
        if not response.ok:
            raise AccessSyncError(_upstream_message(response))


def _upstream_message(response) -> str:
    try:
        errors = response.json().get('errors') or []
    except ValueError:
        errors = []
    if errors and errors[0].get('message'):
        return errors[0]['message']
    return 'Failed to update Cloudflare'


def _rule_email(rule):
    return (rule.get('email') or {}).get('email')


def apply_allowlist_action(includes: list, email: str, action: str) -> list:
    """
    Return a new include-rule list with the email added or removed.

    Adding is idempotent; removing drops every rule for that email.
    """
    new_includes = list(includes)
    if action == 'add':
        if not any(_rule_email(rule) == email for rule in new_includes):
            new_includes.append({'email': {'email': email}})
    elif action == 'remove':
        new_includes = [rule for rule in new_includes if _rule_email(rule) != email]
    return new_includes


def sync_access_allowlist(
    *,
    email,
    action,
    caller: User,
    client: CloudflareAccessClient
) -> list:
    """
    Add or remove a staff email from the Cloudflare Access group.

    Args:
        email: Staff email to sync
        action: 'add' or 'remove'
        caller: Authenticated staff member requesting the sync
        client: Access group client

    Returns:
        The include rules written back to the group

    Raises:
        InsufficientPermissionsError: Caller is not an admin
        InvalidInviteRequestError: Missing email or unknown action
        AccessSyncError: Upstream read or write failed
    """
    if not caller.is_active or caller.role not in ADMIN_ROLES:
        raise InsufficientPermissionsError("Forbidden: Insufficient privileges")
    if not email or not action:
        raise InvalidInviteRequestError("Missing email or action")
    if action not in SYNC_ACTIONS:
        raise InvalidInviteRequestError("Action must be 'add' or 'remove'")

    group = client.get_group()
    includes = apply_allowlist_action(group.get('include') or [], email, action)

    client.put_group({
        'name': group.get('name'),
        'include': includes,
        'exclude': group.get('exclude') or [],
        'require': group.get('require') or [],
    })

    logger.info("Access allow-list %s for %s by %s", action, email, caller.email)
    return includes
