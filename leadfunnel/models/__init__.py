# Models package - database models
from leadfunnel.models.company import Company, ProspectingProfile
from leadfunnel.models.lead import Lead
from leadfunnel.models.activity import ActivityLog
