"""MRO workflow configuration with Pydantic validation."""

from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

REPORT_ID_STRATEGIES = ("counter", "random")


class MROConfig(BaseModel):
    """Main MRO workflow configuration."""

    # Data sources (resolved relative to the working directory)
    tasks_file: str = Field(default="tasks.txt", description="Task catalog file (system|task|steps|parts)")
    stock_file: str = Field(default="stock.txt", description="Stock file (part|quantity)")
    report_log_file: str = Field(default="maintenance_reports.txt", description="Append-only report log")
    write_reports: bool = Field(default=True, description="Append finalized reports to the report log")

    # Record format
    field_separator: str = Field(default="|", description="Separator between record fields")
    list_separator: str = Field(default=",", description="Separator inside step/part lists")

    # Report identifiers
    report_id_prefix: str = Field(default="RPT-", description="Prefix for report identifiers")
    report_id_base: int = Field(default=1000, ge=0, description="Counter base (first report is base + 1)")
    report_id_strategy: str = Field(default="counter", description="Report id strategy (counter, random)")

    # Random seed (None = random); only used by the random report id strategy
    seed: Optional[int] = Field(default=None, description="Random seed for reproducibility")

    # Session context
    aircraft_types: List[str] = Field(
        default_factory=lambda: ["Boeing 737", "Airbus A320", "Gulfstream G550"],
        description="Aircraft that can be selected for service",
    )
    restock_quantity: int = Field(default=5, ge=1, le=1000, description="Units ordered per missing part")
    history_limit: Optional[int] = Field(default=None, ge=1, description="Ledger transactions kept (None = all)")

    # Performance flags
    verbose: bool = Field(default=False, description="Print detailed progress")

    @field_validator("report_id_strategy")
    @classmethod
    def validate_report_id_strategy(cls, v):
        """Ensure report_id_strategy is valid."""
        if v not in REPORT_ID_STRATEGIES:
            raise ValueError(
                f"Invalid report_id_strategy '{v}'. Must be one of: {list(REPORT_ID_STRATEGIES)}"
            )
        return v

    @field_validator("field_separator", "list_separator")
    @classmethod
    def validate_separator(cls, v):
        """Separators are single non-whitespace characters."""
        if len(v) != 1 or v.isspace():
            raise ValueError(f"Separator must be a single non-whitespace character, got {v!r}")
        return v

    @field_validator("seed")
    @classmethod
    def validate_seed(cls, v):
        """Ensure seed is non-negative if provided."""
        if v is not None and v < 0:
            raise ValueError("Seed must be non-negative")
        return v

    @model_validator(mode="after")
    def validate_distinct_separators(self):
        """Field and list separators must differ."""
        if self.field_separator == self.list_separator:
            raise ValueError(
                f"field_separator and list_separator must differ (both {self.field_separator!r})"
            )
        return self


def load_config_from_yaml(path: str) -> MROConfig:
    """Load configuration from YAML file.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated MROConfig object
    """
    import yaml

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    return MROConfig(**(data or {}))


def save_config_to_yaml(config: MROConfig, path: str) -> None:
    """Save configuration to YAML file.

    Args:
        config: MROConfig object
        path: Output YAML path
    """
    import yaml

    with open(path, "w") as f:
        yaml.dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)
