"""ContactsContract schema mapping and content resolver access."""
