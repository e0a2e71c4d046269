"""Output patterns for each resim command.

Each pattern has exactly one capture group. Tokens use letters, digits
and underscore.
"""

TOKEN = r"[a-zA-Z0-9_]+"

# resim new-account
PUBLIC_KEY = rf"Public key: ({TOKEN})"
PRIVATE_KEY = rf"Private key: ({TOKEN})"
ACCOUNT_COMPONENT_ADDRESS = rf"Account component address: ({TOKEN})"

# resim publish <dir>
NEW_PACKAGE = rf"Success! New Package: ({TOKEN})"

# resim show-ledger
LEDGER_ACCOUNT = rf"(account_{TOKEN})"
LEDGER_PACKAGE = rf"(package_{TOKEN})"

# resim show-configs
DEFAULT_ACCOUNT = rf"Account Address: (account_{TOKEN})"

# resim run <manifest>
COMPONENT = rf"Component: ({TOKEN})"
RESOURCE = rf"Resource: ({TOKEN})"
