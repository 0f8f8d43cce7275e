import logging
import uuid
from typing import List, Optional

from ..exceptions import InvalidTransitionError, NotFoundError
from ..storage.memory_storage import InMemoryStorageService
from ..storage.models import (
    CollaborationFrequency,
    FeedbackResponse,
    ReceivedRequest,
    Relationship,
    RequestStatus,
    SentRequest,
    utc_today,
)

logger = logging.getLogger(__name__)


class RequestService:
    """Feedback requests the current user has sent and received."""

    def __init__(self, storage: InMemoryStorageService):
        self._storage = storage

    async def send_request(
        self,
        name: str,
        email: str,
        relationship: Relationship,
        collaboration_frequency: List[CollaborationFrequency],
    ) -> SentRequest:
        """Creates a new Pending request dated today."""
        request = SentRequest(
            id=uuid.uuid4().hex,
            name=name.strip(),
            date=utc_today(),
            status="Pending",
            email=email.strip(),
            relationship=relationship,
            collaboration_frequency=collaboration_frequency,
        )
        await self._storage.set_model(f"sent_request:{request.id}", request)
        logger.info(f"Sent feedback request {request.id} to {request.name}.")
        return request

    async def list_sent_requests(self) -> List[SentRequest]:
        """Returns sent requests, newest first."""
        requests = await self._storage.get_models("sent_request:*", SentRequest)
        return sorted(requests, key=lambda r: r.date, reverse=True)

    async def get_sent_request(self, request_id: str) -> SentRequest:
        request = await self._storage.get_model(f"sent_request:{request_id}", SentRequest)
        if not request:
            raise NotFoundError(f"Sent request {request_id} not found")
        return request

    async def complete_sent_request(self, request_id: str) -> SentRequest:
        """Marks a Submitted request as Completed."""
        request = await self.get_sent_request(request_id)
        if request.status != "Submitted":
            logger.warning(f"Attempted to complete sent request {request_id} in status {request.status}")
            raise InvalidTransitionError(
                f"Only submitted requests can be completed (current status: {request.status})"
            )
        request.status = "Completed"
        await self._storage.set_model(f"sent_request:{request.id}", request)
        logger.info(f"Sent request {request_id} has been completed.")
        return request

    async def list_received_requests(self, status: Optional[RequestStatus] = None) -> List[ReceivedRequest]:
        requests = await self._storage.get_models("received_request:*", ReceivedRequest)
        if status:
            requests = [r for r in requests if r.status == status]
        return requests

    async def get_received_request(self, request_id: str) -> ReceivedRequest:
        request = await self._storage.get_model(f"received_request:{request_id}", ReceivedRequest)
        if not request:
            raise NotFoundError(f"Received request {request_id} not found")
        return request

    async def submit_response(self, request_id: str, response: FeedbackResponse) -> ReceivedRequest:
        """
        Stores the single response for a Pending request and moves it to Submitted.
        The response is stored as given; callers validate and trim beforehand.
        """
        request = await self.get_received_request(request_id)
        if request.status != "Pending":
            logger.warning(f"Attempted to respond to request {request_id} in status {request.status}")
            raise InvalidTransitionError(
                f"A response has already been submitted for this request (status: {request.status})"
            )
        request.response = response
        request.status = "Submitted"
        await self._storage.set_model(f"received_request:{request.id}", request)
        logger.info(f"Submitted response for request {request_id} from {request.name}.")
        return request
