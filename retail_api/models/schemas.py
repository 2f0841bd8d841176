from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional, List, Union
from datetime import datetime
from bson import ObjectId


class DocumentOut(BaseModel):
    """Base for Mongo documents; `_id` goes out under its Mongo name."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")

class MessageOut(BaseModel):
    message: str

# Users
class UserCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)

class UserLogin(BaseModel):
    # plain str: a malformed address is just a failed login
    email: str
    password: str

class UserOut(DocumentOut):
    name: str
    email: str
    role: str = "customer"
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

class AuthOut(BaseModel):
    token: str
    user: UserOut

# Products
class ProductIn(BaseModel):
    name: str = Field(..., min_length=1)
    description: str
    price: float = Field(..., ge=0)
    image: str
    category: str
    stock: int = Field(0, ge=0)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Product name is required")
        return v

class ProductUpdate(BaseModel):
    """Every field optional; only the fields present in the body are applied."""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    image: Optional[str] = None
    category: Optional[str] = None
    stock: Optional[int] = Field(None, ge=0)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Product name cannot be empty")
        return v

    def present_fields(self) -> dict:
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}

class ProductOut(DocumentOut):
    name: str
    description: Optional[str] = None
    price: float
    image: Optional[str] = None
    category: Optional[str] = None
    stock: int = 0
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

class ProductPage(BaseModel):
    items: List[ProductOut]
    page: int
    totalPages: int
    totalCount: int

# Orders
class OrderItemIn(BaseModel):
    product: str
    name: str
    price: float
    quantity: int
    image: str

    @field_validator("product")
    @classmethod
    def check_product_id(cls, v: str) -> str:
        if not ObjectId.is_valid(v):
            raise ValueError("Invalid product id")
        return v

class OrderCreate(BaseModel):
    items: Optional[List[OrderItemIn]] = None
    totalPrice: float

class OrderStatusUpdate(BaseModel):
    orderStatus: str

class OrderItemOut(BaseModel):
    product: str
    name: str
    price: float
    quantity: int
    image: str

class OrderUserOut(DocumentOut):
    name: str
    email: str

class OrderOut(DocumentOut):
    # owner id, or the owner's name and email once joined
    user: Union[OrderUserOut, str, None] = None
    items: List[OrderItemOut]
    totalPrice: float
    paymentStatus: str
    orderStatus: str
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

class OrderStatusOut(BaseModel):
    message: str
    order: OrderOut
