"""
Mock storefront backend providing auth and a subset of business endpoints.

Issues HS256 access tokens and keeps refresh sessions in an httpOnly
``refresh_token`` cookie, the same contract the real backend exposes.
Access tokens carry a generation number; ``expire_access_tokens()`` bumps it
so every outstanding token is rejected with 401 on its next use.
"""

import asyncio
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import jwt
from fastapi import Cookie, FastAPI, Header, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from shared.logging import get_logger


class Credentials(BaseModel):
    email: str
    password: str


class Registration(BaseModel):
    name: str
    email: str
    password: str


class CartItemRequest(BaseModel):
    productId: str
    quantity: int = 1


class OrderRequest(BaseModel):
    addressId: str
    paymentMethod: str


def _now() -> datetime:
    return datetime.now(timezone.utc)


def envelope(data: Any) -> Dict[str, Any]:
    return {"localDateTime": _now().isoformat(), "data": data}


def error_envelope(status_code: int, message: str, errors: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {
        "localDateTime": _now().isoformat(),
        "apiError": {"status_code": status_code, "message": message, "errors": errors or {}},
    }


class MockStorefrontServer:
    """Mock storefront backend implementation."""

    def __init__(self, secret: str = "mock-storefront-secret", refresh_delay: float = 0.0):
        self.logger = get_logger("mock.storefront")
        self.app = FastAPI(title="Mock Storefront", version="1.0.0")
        self.secret = secret
        self.refresh_delay = refresh_delay

        self.users: Dict[str, Dict[str, Any]] = {
            "shopper@example.com": {
                "id": "user-1",
                "name": "Test Shopper",
                "email": "shopper@example.com",
                "password": "Password123",
                "roles": ["USER"],
                "isVerified": True,
            },
        }
        self.sessions: Dict[str, str] = {}
        self.carts: Dict[str, List[Dict[str, Any]]] = {}
        self.categories = [
            {"id": "cat-1", "name": "Rings", "slug": "rings", "isActive": True},
            {"id": "cat-2", "name": "Necklaces", "slug": "necklaces", "isActive": True},
        ]

        # Knobs and counters for tests
        self.token_generation = 0
        self.refresh_enabled = True
        self.refresh_calls = 0
        self.logout_calls = 0
        self.authorization_headers: List[Optional[str]] = []
        self.idempotency_keys: List[Optional[str]] = []

        self._setup_routes()

    def expire_access_tokens(self) -> None:
        """Invalidate every access token issued so far."""
        self.token_generation += 1

    def issue_access_token(self, user: Dict[str, Any]) -> str:
        payload = {
            "sub": user["id"],
            "email": user["email"],
            "name": user["name"],
            "gen": self.token_generation,
            "typ": "access",
            "jti": str(uuid.uuid4()),
            "exp": int((_now() + timedelta(minutes=15)).timestamp()),
        }
        return jwt.encode(payload, self.secret, algorithm="HS256")

    def _public_user(self, user: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in user.items() if k != "password"}

    def _user_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        for user in self.users.values():
            if user["id"] == user_id:
                return user
        return None

    def _authenticate(self, authorization: Optional[str]) -> Dict[str, Any]:
        self.authorization_headers.append(authorization)
        if not authorization or not authorization.startswith("Bearer "):
            raise HTTPException(status_code=401, detail="Access token not found")
        try:
            payload = jwt.decode(authorization[len("Bearer "):], self.secret, algorithms=["HS256"])
        except jwt.InvalidTokenError:
            raise HTTPException(status_code=401, detail="Invalid access token")
        if payload.get("gen") != self.token_generation:
            raise HTTPException(status_code=401, detail="Access token expired")
        user = self._user_by_id(payload["sub"])
        if user is None:
            raise HTTPException(status_code=401, detail="User not found")
        return user

    def _cart_payload(self, user_id: str) -> Dict[str, Any]:
        items = self.carts.get(user_id, [])
        total = sum(item["quantity"] * 10.0 for item in items)
        return {
            "cart": {
                "items": items,
                "summary": {"subtotal": total, "discount": 0, "total": total, "itemCount": len(items)},
            },
            "pagination": {"page": 1, "limit": 12, "total": len(items), "totalPages": 1},
            "message": "Cart fetched successfully",
        }

    def _setup_routes(self):
        """Set up mock storefront routes."""

        @self.app.exception_handler(HTTPException)
        async def http_exception_handler(request: Request, exc: HTTPException):
            return JSONResponse(status_code=exc.status_code, content=error_envelope(exc.status_code, str(exc.detail)))

        @self.app.post("/auth/login")
        async def login(body: Credentials, response: Response):
            user = self.users.get(body.email.lower())
            if user is None or user["password"] != body.password:
                raise HTTPException(status_code=401, detail="Invalid credentials")
            if not user["isVerified"]:
                raise HTTPException(status_code=403, detail="Please verify your email to login")

            refresh_token = str(uuid.uuid4())
            self.sessions[refresh_token] = user["id"]
            response.set_cookie("refresh_token", refresh_token, httponly=True, path="/")
            return envelope({
                "user": self._public_user(user),
                "access_token": self.issue_access_token(user),
                "message": "Login Successfully",
            })

        @self.app.post("/auth/register", status_code=201)
        async def register(body: Registration):
            email = body.email.lower()
            if email in self.users and self.users[email]["isVerified"]:
                raise HTTPException(status_code=409, detail=f"User already exist with this email: {email}")
            user = {
                "id": f"user-{len(self.users) + 1}",
                "name": body.name,
                "email": email,
                "password": body.password,
                "roles": ["USER"],
                "isVerified": False,
            }
            self.users[email] = user
            return envelope({"user": self._public_user(user), "message": "Account Successfully Registered"})

        @self.app.post("/auth/refresh-token")
        async def refresh_token(refresh_token: Optional[str] = Cookie(default=None)):
            self.refresh_calls += 1
            if self.refresh_delay:
                await asyncio.sleep(self.refresh_delay)
            if not self.refresh_enabled:
                raise HTTPException(status_code=401, detail="Invalid or expired refresh token")
            if not refresh_token:
                raise HTTPException(status_code=401, detail="Refresh token not found")
            user_id = self.sessions.get(refresh_token)
            user = self._user_by_id(user_id) if user_id else None
            if user is None:
                raise HTTPException(status_code=401, detail="Invalid or expired refresh token")
            return envelope({
                "access_token": self.issue_access_token(user),
                "user": self._public_user(user),
                "message": "Access token refreshed successfully",
            })

        @self.app.post("/auth/logout")
        async def logout(response: Response, refresh_token: Optional[str] = Cookie(default=None)):
            self.logout_calls += 1
            if refresh_token:
                self.sessions.pop(refresh_token, None)
            response.delete_cookie("refresh_token", path="/")
            return envelope({"message": "Logout successful"})

        @self.app.get("/categories")
        async def list_categories():
            return envelope({
                "categories": self.categories,
                "pagination": {"page": 1, "limit": 10, "total": len(self.categories), "totalPages": 1},
                "message": "Categories fetched successfully",
            })

        @self.app.get("/categories/active")
        async def active_categories():
            # Mirrors a backend bug path: success status without a data field
            return {"localDateTime": _now().isoformat()}

        @self.app.get("/cart")
        async def get_cart(authorization: Optional[str] = Header(default=None)):
            user = self._authenticate(authorization)
            return envelope(self._cart_payload(user["id"]))

        @self.app.post("/cart/add")
        async def add_to_cart(body: CartItemRequest, authorization: Optional[str] = Header(default=None)):
            user = self._authenticate(authorization)
            item = {"id": str(uuid.uuid4()), "userId": user["id"], "productId": body.productId, "quantity": body.quantity}
            self.carts.setdefault(user["id"], []).append(item)
            return envelope({"cartItem": item, "message": "Item added to cart"})

        @self.app.delete("/cart/clear")
        async def clear_cart(authorization: Optional[str] = Header(default=None)):
            user = self._authenticate(authorization)
            self.carts[user["id"]] = []
            return envelope({"message": "Cart cleared"})

        @self.app.get("/wishlist")
        async def get_wishlist(authorization: Optional[str] = Header(default=None)):
            self._authenticate(authorization)
            return envelope({
                "items": [],
                "pagination": {"page": 1, "limit": 12, "total": 0, "totalPages": 0},
                "message": "Wishlist fetched successfully",
            })

        @self.app.get("/orders")
        async def list_orders(authorization: Optional[str] = Header(default=None)):
            self._authenticate(authorization)
            return envelope({
                "order": [],
                "pagination": {"page": 1, "limit": 10, "total": 0, "totalPages": 0},
                "message": "Orders fetched successfully",
            })

        @self.app.post("/orders", status_code=201)
        async def create_order(body: OrderRequest,
                               authorization: Optional[str] = Header(default=None),
                               idempotency_key: Optional[str] = Header(default=None)):
            self.idempotency_keys.append(idempotency_key)
            user = self._authenticate(authorization)
            order = {
                "id": str(uuid.uuid4()),
                "orderNumber": str(uuid.uuid4()),
                "userId": user["id"],
                "addressId": body.addressId,
                "status": "PENDING",
                "items": self.carts.get(user["id"], []),
            }
            return envelope({"order": order, "message": "Order created successfully"})


def create_app(**kwargs):
    """Create mock storefront application."""
    server = MockStorefrontServer(**kwargs)
    return server.app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
