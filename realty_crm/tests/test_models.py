"""Model helpers and defaults."""

from __future__ import annotations

from realty_crm.models import Contact, Property, PropertyImage, User


def test_contact_full_name():
    assert Contact(first_name="Jane", last_name="Doe").full_name == "Jane Doe"
    assert Contact(first_name="", last_name="").full_name == "Unnamed"


def test_user_display_name_falls_back():
    assert User(email="a@b.com", full_name="Pat Agent").display_name == "Pat Agent"
    assert User(email="a@b.com", first_name="Pat").display_name == "Pat"
    assert User(email="a@b.com").display_name == "a@b.com"


def test_primary_image_prefers_flag_then_sort_order():
    prop = Property(title="x", address="x", city="x", state="x", property_type="Condo")
    assert prop.primary_image is None

    second = PropertyImage(image_url="/2", sort_order=1, is_primary=False)
    first = PropertyImage(image_url="/1", sort_order=0, is_primary=False)
    prop.images = [second, first]
    assert prop.primary_image is first

    second.is_primary = True
    assert prop.primary_image is second
