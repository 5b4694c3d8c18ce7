"""ORM models. Importing this package registers every table with Base.metadata."""
from marketplace.models.account import Account, AccountRole, AccountStatus  # noqa: F401
from marketplace.models.profile import AdminProfile, EmployeeProfile, CustomerProfile, ProviderProfile  # noqa: F401
from marketplace.models.event import Event, EventStatus  # noqa: F401
from marketplace.models.service import Service, ServiceType  # noqa: F401
from marketplace.models.proposal import Proposal, ProposalStatus  # noqa: F401
from marketplace.models.booking import Booking, BookingStatus  # noqa: F401
from marketplace.models.activity import Activity  # noqa: F401
from marketplace.models.notification import Notification  # noqa: F401
from marketplace.models.portfolio import PortfolioItem  # noqa: F401
from marketplace.models.review import Review  # noqa: F401
