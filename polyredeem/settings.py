from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="POLYREDEEM_", env_file=".env", extra="ignore")

    # Execution mode
    # - "paper": in-memory CTF simulation, nothing leaves the process
    # - "live": Polygon via web3 (needs rpc_url + private_key)
    mode: str = "paper"

    # Chain
    rpc_url: str = "https://polygon-rpc.com"
    private_key: str | None = None
    chain_id: int = 137

    # Contracts (Polygon mainnet)
    ctf_address: str = "0x4D97DCd97eC945f40cF65F87097ACe5EA0476045"
    collateral_address: str = "0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174"  # USDC.e
    token_decimals: int = 6

    # Transactions
    gas_limit: int = 300_000
    receipt_timeout_seconds: float = 120.0

    # Market lookup (Gamma)
    gamma_base_url: str = "https://gamma-api.polymarket.com"
    user_agent: str = "polyredeem/0.1"

    # Journal of completed merges/redemptions
    journal_path: str = "polyredeem.db"

    # Paper mode: optional JSON file seeding the simulated chain
    paper_state_file: str | None = None


settings = Settings()
