"""
Base interfaces for integration providers.
"""
from abc import ABC, abstractmethod
from typing import Dict, Any


class ContactDispatcher(ABC):
    """Base interface for contact-initiation automations (n8n, Make, etc.)"""

    @abstractmethod
    async def dispatch(self, payload: Dict[str, Any]) -> None:
        """
        Ask the automation to start a conversation with a lead.

        Payload:
            {
                "lead_id": str,
                "company_id": str,
                "company_name": str,
                "phone": str | None,
                "whatsapp": str | None,
                "profile": {
                    "niche": str,
                    "client_type": str,
                    "min_ticket": float,
                    "requires_decision_maker": bool,
                    "min_urgency": str
                }
            }

        Raises:
            UpstreamDeliveryError when the automation did not accept the lead.
        """
        pass
