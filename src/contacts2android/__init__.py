"""Bridge between the W3C Contacts JSON API and Android's ContactsContract provider."""

__version__ = "0.1.0"
