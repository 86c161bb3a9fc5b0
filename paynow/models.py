"""Typed Paynow v3 wire models.

Attributes are snake_case in Python and camelCase on the wire; both names are
accepted on input. Amounts are integers in the smallest currency unit.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, SecretStr, StrictInt
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for payloads exchanged with Paynow."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_json(self) -> str:
        """Compact JSON with wire names; unset optional fields are omitted."""

        return self.model_dump_json(by_alias=True, exclude_none=True)


class Environment(str, Enum):
    SANDBOX = "sandbox"
    PRODUCTION = "production"

    @property
    def base_url(self) -> str:
        if self is Environment.PRODUCTION:
            return "https://api.paynow.pl/v3"
        return "https://api.sandbox.paynow.pl/v3"


class PaymentStatus(str, Enum):
    """Status as reported by Paynow; no transitions are enforced here."""

    NEW = "NEW"
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    REJECTED = "REJECTED"
    ERROR = "ERROR"
    EXPIRED = "EXPIRED"
    ABANDONED = "ABANDONED"


class Currency(str, Enum):
    PLN = "PLN"
    EUR = "EUR"
    USD = "USD"
    GBP = "GBP"


class Credentials(WireModel):
    """Merchant credentials bound to one client instance.

    `signature_key` only ever feeds HMAC digests and is masked in reprs.
    """

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(min_length=1)
    signature_key: SecretStr
    environment: Environment = Environment.SANDBOX


class Phone(WireModel):
    prefix: str
    number: str


class Address(WireModel):
    street: str | None = None
    house_number: str | None = None
    apartment_number: str | None = None
    zipcode: str | None = None
    city: str | None = None
    county: str | None = None
    country: str | None = None


class BuyerAddress(WireModel):
    billing: Address | None = None
    shipping: Address | None = None


class Buyer(WireModel):
    email: str
    first_name: str | None = None
    last_name: str | None = None
    phone: Phone | None = None
    address: BuyerAddress | None = None
    locale: str | None = None
    external_id: str | int | None = None


class OrderItem(WireModel):
    name: str
    producer: str | None = None
    category: str
    quantity: StrictInt
    # minor units
    price: StrictInt


class PaymentRequest(WireModel):
    """Body of `POST /payments`."""

    amount: StrictInt
    external_id: str | int
    description: str
    buyer: Buyer
    continue_url: str | None = None
    currency: Currency | None = None
    validity_time: StrictInt | None = None
    order_items: list[OrderItem] | None = None


class PaymentResponse(WireModel):
    payment_id: str
    redirect_url: str | None = None
    status: PaymentStatus


class PaymentStatusResponse(WireModel):
    """Body of `GET /payments/{paymentId}`; only id and status are guaranteed."""

    payment_id: str
    status: PaymentStatus
    external_id: str | int | None = None
    amount: int | None = None
    currency: str | None = None
    buyer: Buyer | None = None
    created_at: str | None = None
    modified_at: str | None = None


class PaymentNotification(WireModel):
    """Webhook body sent by Paynow on a status change."""

    payment_id: str
    external_id: str
    status: PaymentStatus
    modified_at: str


class ProviderError(WireModel):
    message: str
    field: str | None = None
    code: str | None = None


class ProviderErrorEnvelope(WireModel):
    errors: list[ProviderError] = Field(default_factory=list)
