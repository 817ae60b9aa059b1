"""
Reserved usernames, common passwords and keyboard/alphabet runs.
"""

USERNAME_BLACKLIST = frozenset({
    "admin", "administrator", "root", "user", "system", "guest", "test", "demo",
    "support", "help", "api", "www", "mail", "email", "ftp", "ssh", "login",
    "signin", "signup", "register", "auth", "authentication", "password", "passwd",
    "null", "undefined", "void", "delete", "drop", "select", "insert", "update",
    "create", "alter", "grant", "revoke", "exec", "execute", "script", "eval",
    "function", "class", "object", "array", "string", "number", "boolean",
    "moderator", "mod", "operator", "staff", "superuser", "su", "sudo",
    "postmaster", "webmaster", "hostmaster", "abuse", "security", "info",
    "service", "daemon", "bin", "sys", "config", "settings", "account",
    "profile", "dashboard", "home", "index", "main", "default", "public",
    "private", "internal", "external", "local", "remote", "server", "client",
    "database", "db", "sql", "query", "backup", "restore", "import", "export",
    "file", "folder", "directory", "path", "url", "uri", "http", "https",
    "tcp", "udp", "ip", "dns", "smtp", "pop", "imap", "ssl", "tls",
    "no-reply", "noreply", "donotreply", "bounce", "mailer-daemon",
    "contact", "sales", "marketing", "billing", "invoice", "payment",
    "order", "shop", "store", "cart", "checkout", "buy", "sell",
    "news", "blog", "forum", "community", "social", "media", "press",
})

# Any username containing one of these is refused outright.
RESERVED_SUBSTRINGS = ("admin", "root", "system")

COMMON_PASSWORDS = frozenset({
    "password", "123456", "123456789", "qwerty", "abc123", "password123",
    "admin", "letmein", "welcome", "monkey", "1234567890", "dragon",
    "princess", "login", "solo", "qwertyuiop", "starwars", "master",
    "shadow", "iloveyou", "michael", "superman", "batman", "trustno1",
    "hello", "freedom", "whatever", "nicole", "jordan", "cameron",
    "secret", "summer", "michelle", "daniel", "jessica", "purple",
    "amanda", "orange", "jennifer", "joshua", "hunter", "chelsea",
    "yellow", "melissa", "matthew", "andrew", "ashley", "hannah",
    "password1", "123123", "mustang", "scooter", "ginger", "flower",
    "compaq", "cowboy", "martin", "computer", "maverick", "cookie",
    "thunder", "bird33", "forest", "chelsea1", "chicken", "wizard",
    "rabbit", "enter", "chevy", "helpme", "marlboro", "johnson",
    "midnight", "coffee", "buster", "hannah1", "thomas", "hockey",
    "batman1", "toyota", "jordan1", "prelude", "mangoes",
    "spanky", "mike", "johnson1", "secret1", "rachel", "qwert",
    "family", "internet", "service", "school", "love", "god",
    "silver", "diamond", "metallic", "zombie", "swimming", "dolphin",
    "dragons", "paradise", "mother", "picture", "money", "goddess",
    "dancer", "harley", "whatever1", "boomer",
})

SEQUENTIAL_PATTERNS = (
    "123456789", "987654321",
    "abcdefghij", "zyxwvutsrq",
    "qwertyuiop", "poiuytrewq",
    "asdfghjkl", "lkjhgfdsa",
)
