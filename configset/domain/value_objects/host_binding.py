from dataclasses import dataclass


@dataclass(frozen=True)
class HostBinding:
    """
    Value Object binding a host label to the IP address of one deployed machine.
    Change set scripts see it as the shell variable ``label``.
    """
    label: str
    ip_address: str

    def __post_init__(self):
        if not self.label:
            raise ValueError("Host label cannot be empty")

    def export_clause(self) -> str:
        return f"export {self.label}={self.ip_address} && "

    def __str__(self):
        return f"{self.label}={self.ip_address}"
