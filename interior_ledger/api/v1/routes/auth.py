# interior_ledger/api/v1/routes/auth.py
from fastapi import APIRouter, Response, status

router = APIRouter(tags=["Authentication"])

@router.post("/jwt/logout", status_code=status.HTTP_200_OK)
async def logout(response: Response):
    """
    Logout that does not require a valid token. Clears the access token
    cookie if the client set one.
    """
    response.delete_cookie(key="access_token")
    return {"detail": "Successfully logged out"}
