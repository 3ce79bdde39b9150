from models.orphan_status import OrphanStatus, OrphanSponsorshipStatus
from models.province import Province
from models.partner import Partner
from models.orphan_list import OrphanList
from models.address import Address
from models.sponsor import Sponsor
from models.sponsorship import Sponsorship
from models.sequence import Sequence
from models.orphan import Orphan

__all__ = [
    "OrphanStatus", "OrphanSponsorshipStatus", "Province", "Partner",
    "OrphanList", "Address", "Sponsor", "Sponsorship", "Sequence", "Orphan",
]
