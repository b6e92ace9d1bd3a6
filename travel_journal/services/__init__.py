# Services package init
"""
Travel Journal Backend — Services Layer
=========================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
Why:   Routes handle HTTP, services handle business rules.

Service Inventory:
    - CredentialVerifier (abstract): opaque bearer token → user id
    - DemoTokenVerifier: demo-token / token-<id> implementation
    - UserService: registration, login, profile lookup
    - JournalService: persistence facade for entries and country statuses
    - CountryDirectory: cached proxy to the REST Countries API

Each module exposes a singleton instance (journal_service, user_service,
token_verifier, country_directory) that the routes reach through FastAPI
dependencies, so tests can override them.
"""
