"""Test configuration and helpers."""

from lengleng.domain.value import Contact


def make_contact(
    phone_number: str = "5551234567",
    name: str = "Jamie",
    school: str | None = "Lincoln High",
) -> Contact:
    """Helper to build a contact as picked from the address book.

    Args:
        phone_number: Recipient phone number
        name: Display name
        school: Optional school used by the message templates

    Returns:
        Contact value object
    """
    return Contact(phone_number=phone_number, name=name, school=school)
