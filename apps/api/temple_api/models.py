"""Import every table so SQLModel.metadata is complete (create_all / alembic)."""
from __future__ import annotations

from temple_api.modules.households.models import Household
from temple_api.modules.memorial_rules.models import MemorialRule
from temple_api.modules.deceased.models import Deceased
from temple_api.modules.memorial.models import MemorialInstance

__all__ = ["Household", "MemorialRule", "Deceased", "MemorialInstance"]
