"""Request bodies accepted by the front-end service."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _Body(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EmailBody(_Body):
    """Body carrying only an email address."""

    email: str


class OtpBody(_Body):
    """Email verification form."""

    email: str
    otp: str = ""


class ResetPasswordBody(_Body):
    """Password reset form."""

    email: str
    otp: str = ""
    new_password: str = ""
    confirm_password: str = ""


class FoodItemBody(_Body):
    """Food item form; validated by the mutation flow, not here."""

    name: str | None = None
    description: str | None = None
    calorie: int | str | None = None
    quantity: str | None = None
    consumed_date: str | None = None
