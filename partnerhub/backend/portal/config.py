from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --- Runtime ---
    ENV: str = "dev"  # dev|prod
    LOG_LEVEL: str = "INFO"

    # --- Minimal B2B Auth (API key) ---
    # Send: X-API-Key: <key>   (only guards /debug/* routes)
    API_KEY: str | None = None

    # --- Listings provider (VaultRE) ---
    # All three must be set; a missing one is a configuration fault.
    VAULTRE_API_URL: str | None = None
    VAULTRE_API_TOKEN: str | None = None
    VAULTRE_API_KEY: str | None = None

    # --- Relay tier (non-prod pass-through that holds its own credentials) ---
    RELAY_BASE_URL: str | None = None

    # --- Outbound HTTP ---
    # None = no client-side timeout; the transport's own limits apply.
    HTTP_TIMEOUT_S: float | None = None
    # Retries apply to network-level failures only, never to HTTP statuses.
    HTTP_MAX_RETRIES: int = 0
    HTTP_BACKOFF_BASE_S: float = 0.5

    # --- Fallback policy ---
    # Endpoint kinds that substitute sample data on upstream errors.
    # Anything not listed surfaces the upstream error to the caller.
    FALLBACK_ENDPOINTS: str = "categories,status"

    # Cache header on the search response (the gateway itself never caches)
    SEARCH_CACHE_CONTROL: str = "public, s-maxage=300, stale-while-revalidate=600"

    def fallback_endpoints(self) -> set[str]:
        return {p.strip().lower() for p in self.FALLBACK_ENDPOINTS.split(",") if p.strip()}


settings = Settings()
