"""Request and response bodies of the HTTP API."""
from pydantic import BaseModel


class RenewalRequest(BaseModel):
    secret: str
    action: str = "renew"


class RenewalResponse(BaseModel):
    success: bool
    message: str
    platform: str


class StatusResponse(BaseModel):
    platform: str
    tailscale_installed: bool
    service: str = "running"
