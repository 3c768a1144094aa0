"""
Public invitation lookup, used by the signup page behind an invitation link.
"""

from fastapi import APIRouter, Depends

from app.core.deps import get_invitation_manager
from app.schemas.invitation import InvitationResponse
from app.services.invitations import InvitationTokenManager

router = APIRouter(prefix="/invitations", tags=["Invitations"])


@router.get("/{token}", response_model=InvitationResponse)
def get_invitation(
    token: str,
    invitations: InvitationTokenManager = Depends(get_invitation_manager),
):
    """Returns the invitation, or 404 for unknown or expired tokens."""
    return invitations.resolve(token)
