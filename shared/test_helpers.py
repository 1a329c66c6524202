"""
Test helper functions and factory methods for the storefront client.
"""

import uuid
from typing import Dict, Any, Optional, List
from datetime import datetime, timedelta, timezone
from dataclasses import dataclass, field
import jwt


@dataclass
class TestUser:
    """Test user data."""
    __test__ = False

    user_id: str
    name: str
    email: str
    roles: List[str] = field(default_factory=lambda: ["USER"])
    password: str = "Password123"
    is_verified: bool = True

    def to_wire(self) -> Dict[str, Any]:
        """User as serialized by the backend."""
        return {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "roles": self.roles,
            "isVerified": self.is_verified,
            "createdAt": "2024-01-01T00:00:00Z",
            "updatedAt": "2024-01-01T00:00:00Z",
        }


class TestDataFactory:
    """Factory for creating test data."""
    __test__ = False

    @staticmethod
    def create_test_users() -> List[TestUser]:
        """Create test users."""
        return [
            TestUser(user_id="user-1", name="Test Shopper", email="shopper@example.com"),
            TestUser(user_id="vendor-1", name="Test Vendor", email="vendor@example.com", roles=["VENDOR"]),
        ]

    @staticmethod
    def create_test_cart(items: int = 2) -> Dict[str, Any]:
        """Create a cart payload as returned by GET /cart."""
        cart_items = [
            {
                "id": f"item-{i}",
                "userId": "user-1",
                "productId": f"product-{i}",
                "quantity": i + 1,
                "product": {
                    "id": f"product-{i}",
                    "name": f"Product {i}",
                    "price": 10.0,
                    "salePrice": None,
                    "images": [],
                    "jewelrySize": "SMALL",
                    "isActive": True,
                    "stock": 5,
                },
            }
            for i in range(items)
        ]
        subtotal = sum(item["quantity"] * 10.0 for item in cart_items)
        return {
            "cart": {
                "items": cart_items,
                "summary": {"subtotal": subtotal, "discount": 0, "total": subtotal, "itemCount": items},
            },
            "pagination": {"page": 1, "limit": 12, "total": items, "totalPages": 1},
            "message": "Cart fetched successfully",
        }


class MockTokenGenerator:
    """Generate mock JWT access tokens for testing."""

    def __init__(self, secret: str = "mock-secret"):
        self.secret = secret

    def generate_access_token(self, user: TestUser, expires_in: int = 900) -> str:
        """Generate access token for user."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user.user_id,
            "name": user.name,
            "email": user.email,
            "isVerified": user.is_verified,
            "jti": str(uuid.uuid4()),
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(seconds=expires_in)).timestamp()),
        }

        return jwt.encode(payload, self.secret, algorithm="HS256")

    def login_payload(self, user: TestUser, message: str = "Login Successfully") -> Dict[str, Any]:
        """Body of a successful /auth/login or /auth/refresh-token call."""
        return {
            "user": user.to_wire(),
            "access_token": self.generate_access_token(user),
            "message": message,
        }


def make_envelope(data: Any = None, error_message: Optional[str] = None,
                  status_code: int = 200) -> Dict[str, Any]:
    """Build a response envelope."""
    body: Dict[str, Any] = {"localDateTime": datetime.now(timezone.utc).isoformat()}
    if data is not None:
        body["data"] = data
    if error_message is not None:
        body["apiError"] = {"status_code": status_code, "message": error_message, "errors": {}}
    return body


# Global instances for easy access
test_data_factory = TestDataFactory()
mock_token_generator = MockTokenGenerator()
