"""
Random post data for tests.

Generates plausible names, words, paragraphs and past timestamps.
Only the non-empty required fields matter, not the distribution.
"""

from typing import Any

from faker import Faker

from core.storage import AuthorName, PostRecord


fake = Faker()


def generate_author_name() -> dict[str, str]:
    return {
        "firstName": fake.first_name(),
        "lastName": fake.last_name(),
    }


def generate_title() -> str:
    return fake.word()


def generate_content() -> str:
    return "\n\n".join(fake.paragraphs())


def generate_post_record() -> PostRecord:
    """A record ready for BasePostRepository.insert_many()."""
    return PostRecord(
        author=AuthorName.from_dict(generate_author_name()),
        title=generate_title(),
        content=generate_content(),
        created=fake.past_datetime(),
    )


def generate_post_payload() -> dict[str, Any]:
    """A POST /posts request body."""
    return {
        "title": fake.sentence(),
        "author": generate_author_name(),
        "content": fake.text(),
    }
