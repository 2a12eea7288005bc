"""
Value objects for Twenty's composite field types.

Each value object converts between the API's nested dictionary shape and
a small dataclass with convenience accessors.
"""

from dataclasses import dataclass, field
from typing import Any

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CHF": "CHF ",
    "CAD": "C$",
    "AUD": "A$",
    "CNY": "¥",
    "INR": "₹",
}

MICROS_PER_UNIT = 1_000_000


@dataclass
class Name:
    """A FULL_NAME value."""
    first_name: str | None = None
    last_name: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Name":
        return cls(first_name=data.get("firstName"), last_name=data.get("lastName"))

    def to_dict(self) -> dict[str, Any]:
        return {"firstName": self.first_name, "lastName": self.last_name}

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    def is_empty(self) -> bool:
        return not self.first_name and not self.last_name

    def __str__(self) -> str:
        return self.full_name


@dataclass
class Address:
    """An ADDRESS value. Unset parts are omitted from to_dict()."""
    street1: str | None = None
    street2: str | None = None
    city: str | None = None
    state: str | None = None
    post_code: str | None = None
    country: str | None = None
    lat: float | None = None
    lng: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Address":
        # The API spells it addressPostcode; addressPostCode is accepted as well
        post_code = data.get("addressPostCode")
        if post_code is None:
            post_code = data.get("addressPostcode")

        lat = data.get("addressLat")
        lng = data.get("addressLng")

        return cls(
            street1=data.get("addressStreet1"),
            street2=data.get("addressStreet2"),
            city=data.get("addressCity"),
            state=data.get("addressState"),
            post_code=post_code,
            country=data.get("addressCountry"),
            lat=float(lat) if lat is not None else None,
            lng=float(lng) if lng is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        data = {
            "addressStreet1": self.street1,
            "addressStreet2": self.street2,
            "addressCity": self.city,
            "addressState": self.state,
            "addressPostCode": self.post_code,
            "addressCountry": self.country,
            "addressLat": self.lat,
            "addressLng": self.lng,
        }
        return {key: value for key, value in data.items() if value is not None}

    def is_empty(self) -> bool:
        return not self.to_dict()


@dataclass
class Currency:
    """A CURRENCY value stored as integer micros (1.50 USD == 1_500_000)."""
    amount_micros: int = 0
    currency_code: str = "USD"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Currency":
        return cls(
            amount_micros=int(data.get("amountMicros") or 0),
            currency_code=data.get("currencyCode") or "USD",
        )

    @classmethod
    def from_amount(cls, amount: float, currency_code: str = "USD") -> "Currency":
        """Build from a decimal amount, rounding to the nearest micro."""
        return cls(
            amount_micros=int(round(amount * MICROS_PER_UNIT)),
            currency_code=currency_code,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"amountMicros": self.amount_micros, "currencyCode": self.currency_code}

    @property
    def amount(self) -> float:
        return self.amount_micros / MICROS_PER_UNIT

    @amount.setter
    def amount(self, value: float) -> None:
        self.amount_micros = int(round(value * MICROS_PER_UNIT))

    @property
    def symbol(self) -> str:
        return CURRENCY_SYMBOLS.get(self.currency_code, "")

    def formatted(self, decimals: int = 2) -> str:
        """Human-readable amount, e.g. "$1,234.50 USD"."""
        return f"{self.symbol}{self.amount:,.{decimals}f} {self.currency_code}"

    def __str__(self) -> str:
        return self.formatted()


@dataclass
class Link:
    """One URL with an optional label."""
    url: str | None = None
    label: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Link":
        return cls(url=data.get("url"), label=data.get("label"))

    def to_dict(self) -> dict[str, Any]:
        data = {}
        if self.url is not None:
            data["url"] = self.url
        if self.label is not None:
            data["label"] = self.label
        return data


@dataclass
class LinkCollection:
    """A LINKS value: a primary link plus any number of secondary links."""
    primary_link: Link | None = None
    secondary_links: list[Link] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LinkCollection":
        primary_link = None
        if data.get("primaryLinkUrl") is not None or data.get("primaryLinkLabel") is not None:
            primary_link = Link(url=data.get("primaryLinkUrl"), label=data.get("primaryLinkLabel"))

        secondary_links = [
            Link.from_dict(item)
            for item in data.get("secondaryLinks") or []
            if isinstance(item, dict)
        ]

        return cls(primary_link=primary_link, secondary_links=secondary_links)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.primary_link is not None:
            data["primaryLinkUrl"] = self.primary_link.url
            data["primaryLinkLabel"] = self.primary_link.label
        if self.secondary_links:
            data["secondaryLinks"] = [link.to_dict() for link in self.secondary_links]
        return data

    @property
    def all_links(self) -> list[Link]:
        links = [self.primary_link] if self.primary_link is not None else []
        return links + self.secondary_links

    def add_secondary_link(self, link: Link) -> None:
        self.secondary_links.append(link)

    def is_empty(self) -> bool:
        return self.primary_link is None and not self.secondary_links


@dataclass
class Phone:
    """One phone number with its country and calling codes."""
    number: str | None = None
    country_code: str | None = None
    calling_code: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Phone":
        return cls(
            number=data.get("number", data.get("primaryPhoneNumber")),
            country_code=data.get("countryCode", data.get("primaryPhoneCountryCode")),
            calling_code=data.get("callingCode", data.get("primaryPhoneCallingCode")),
        )

    def to_dict(self) -> dict[str, Any]:
        data = {}
        if self.number is not None:
            data["number"] = self.number
        if self.country_code is not None:
            data["countryCode"] = self.country_code
        if self.calling_code is not None:
            data["callingCode"] = self.calling_code
        return data

    @property
    def formatted(self) -> str | None:
        """Number prefixed with its calling code, e.g. "+4915112345678"."""
        if self.number is None:
            return None
        if self.calling_code is not None:
            return f"{self.calling_code}{self.number}"
        return self.number


@dataclass
class PhoneCollection:
    """A PHONES value: a primary phone plus additional phones."""
    primary_phone: Phone | None = None
    additional_phones: list[Phone] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PhoneCollection":
        primary_phone = None
        primary_keys = ("primaryPhoneNumber", "primaryPhoneCountryCode", "primaryPhoneCallingCode")
        if any(data.get(key) is not None for key in primary_keys):
            primary_phone = Phone(
                number=data.get("primaryPhoneNumber"),
                country_code=data.get("primaryPhoneCountryCode"),
                calling_code=data.get("primaryPhoneCallingCode"),
            )

        additional_phones = []
        for item in data.get("additionalPhones") or []:
            if isinstance(item, dict):
                additional_phones.append(Phone.from_dict(item))
            elif isinstance(item, str):
                additional_phones.append(Phone(number=item))

        return cls(primary_phone=primary_phone, additional_phones=additional_phones)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.primary_phone is not None:
            if self.primary_phone.number is not None:
                data["primaryPhoneNumber"] = self.primary_phone.number
            if self.primary_phone.country_code is not None:
                data["primaryPhoneCountryCode"] = self.primary_phone.country_code
            if self.primary_phone.calling_code is not None:
                data["primaryPhoneCallingCode"] = self.primary_phone.calling_code
        if self.additional_phones:
            data["additionalPhones"] = [phone.to_dict() for phone in self.additional_phones]
        return data

    @property
    def primary_number(self) -> str | None:
        """The primary number, falling back to the first additional phone."""
        if self.primary_phone is not None:
            return self.primary_phone.number
        if self.additional_phones:
            return self.additional_phones[0].number
        return None

    @property
    def all_phones(self) -> list[Phone]:
        phones = [self.primary_phone] if self.primary_phone is not None else []
        return phones + self.additional_phones

    def add_additional_phone(self, phone: Phone) -> None:
        self.additional_phones.append(phone)

    def is_empty(self) -> bool:
        return self.primary_phone is None and not self.additional_phones
