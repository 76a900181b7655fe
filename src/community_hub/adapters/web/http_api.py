"""HTTP API for the community hub.

Durable state (feed posts, chat history, labour posts, loans, payments) and
the concurrency-guarded counters are exposed over plain JSON routes;
realtime notifications go out through the Socket.IO hub.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from community_hub.adapters.web.rate_limit_middleware import extract_client_ip
from community_hub.adapters.web.schemas import (
    CreateLabourPostRequest,
    CreateLoanRequest,
    CreatePostRequest,
    CreateTransactionRequest,
    LabourApplyRequest,
    LoanApplyRequest,
    VoteRequest,
)
from community_hub.domain.contracts import ConnectionRegistryProtocol
from community_hub.domain.models import (
    STARTING_BALANCE,
    AlreadyAppliedError,
    ChatMessage,
    CommunityPost,
    HubError,
    JobFilledError,
    LabourPost,
    LabourSlotCounter,
    LoanNotFoundError,
    LoanOffer,
    LoanUnavailableError,
    PaymentTransaction,
    PostNotFoundError,
    running_balance,
)
from community_hub.domain.ports import (
    CallLogStore,
    LabourSlotService,
    LabourStore,
    LoanClaimService,
    LoanStore,
    MessageStore,
    PostStore,
    TransactionStore,
    VoteCounterService,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[HubError], int], ...] = (
    (PostNotFoundError, 404),
    (LoanNotFoundError, 404),
    (AlreadyAppliedError, 409),
    (JobFilledError, 409),
    (LoanUnavailableError, 409),
)


def _new_id() -> str:
    return uuid.uuid4().hex


def _error_response(error: HubError) -> JSONResponse:
    status_code = next(
        (status for error_type, status in _STATUS_BY_ERROR if isinstance(error, error_type)), 400
    )
    return JSONResponse({"error": error.code, "message": error.message}, status_code=status_code)


def _invalid_payload(message: str) -> JSONResponse:
    return JSONResponse({"error": "invalid-payload", "message": message}, status_code=400)


async def _read_json(request: Request) -> dict[str, Any]:
    body = await request.body()
    if not body:
        return {}
    data = json.loads(body)
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    return data


def _format_post(post: CommunityPost, votes: int = 0) -> dict[str, Any]:
    return {
        "id": post.post_id,
        "user": {"id": post.author_id, "name": post.author_name, "avatar": post.author_avatar},
        "content": post.content,
        "image": post.image,
        "votes": votes,
        "userVote": 0,
        "createdAt": post.created_at.isoformat(),
    }


def _format_labour_post(post: LabourPost, slots: LabourSlotCounter) -> dict[str, Any]:
    return {
        "id": post.post_id,
        "farmerName": post.farmer_name,
        "farmerId": post.farmer_id,
        "workType": post.work_type,
        "location": post.location,
        "duration": post.duration,
        "offeredWage": post.offered_wage,
        "labourCount": slots.remaining_slots,
        "notes": post.notes,
        "status": slots.status.value,
        "createdAt": post.created_at.isoformat(),
    }


def _format_loan(loan: LoanOffer) -> dict[str, Any]:
    return {
        "id": loan.loan_id,
        "lender": loan.lender,
        "lenderId": loan.lender_id,
        "borrower": loan.borrower,
        "amount": loan.amount,
        "interest": loan.interest,
        "duration": loan.duration_days,
        "status": loan.status.value,
        "collateral": loan.collateral,
        "createdAt": loan.created_at.isoformat(),
    }


def _format_message(message: ChatMessage) -> dict[str, Any]:
    return {
        "user": message.author_name,
        "content": message.content,
        "createdAt": message.created_at.isoformat(),
    }


def _format_transaction(tx: PaymentTransaction, direction: str) -> dict[str, Any]:
    return {
        "id": tx.transaction_id,
        "type": direction,
        "from": tx.sender_name,
        "to": tx.recipient_name,
        "amount": tx.amount,
        "createdAt": tx.created_at.isoformat(),
    }


class CommunityHttpApi:
    """Starlette route handlers backed by the hub's stores and counters."""

    def __init__(
        self,
        registry: ConnectionRegistryProtocol,
        post_store: PostStore,
        labour_store: LabourStore,
        loan_store: LoanStore,
        call_log_store: CallLogStore,
        message_store: MessageStore,
        transaction_store: TransactionStore,
        votes: VoteCounterService,
        labour_slots: LabourSlotService,
        loan_claims: LoanClaimService,
        call_log_limit: int = 30,
        labour_posts_limit: int = 20,
        feed_posts_limit: int = 50,
        chat_history_limit: int = 100,
        loans_limit: int = 50,
        transactions_limit: int = 50,
        starting_balance: float = STARTING_BALANCE,
    ) -> None:
        self.registry = registry
        self.post_store = post_store
        self.labour_store = labour_store
        self.loan_store = loan_store
        self.call_log_store = call_log_store
        self.message_store = message_store
        self.transaction_store = transaction_store
        self.votes = votes
        self.labour_slots = labour_slots
        self.loan_claims = loan_claims
        self.call_log_limit = call_log_limit
        self.labour_posts_limit = labour_posts_limit
        self.feed_posts_limit = feed_posts_limit
        self.chat_history_limit = chat_history_limit
        self.loans_limit = loans_limit
        self.transactions_limit = transactions_limit
        self.starting_balance = starting_balance

    def routes(self) -> list[Route]:
        return [
            Route("/healthz", self.healthz, methods=["GET"]),
            Route("/api/community/online-users", self.online_users, methods=["GET"]),
            Route("/api/community/posts", self.list_posts, methods=["GET"]),
            Route("/api/community/posts", self.create_post, methods=["POST"]),
            Route("/api/community/posts/{post_id}/vote", self.vote, methods=["POST"]),
            Route("/api/community/messages", self.list_messages, methods=["GET"]),
            Route("/api/labour/posts", self.list_labour_posts, methods=["GET"]),
            Route("/api/labour/posts", self.create_labour_post, methods=["POST"]),
            Route("/api/labour/posts/{post_id}/apply", self.apply_labour, methods=["POST"]),
            Route("/api/community/loans", self.list_loans, methods=["GET"]),
            Route("/api/community/loans", self.create_loan, methods=["POST"]),
            Route("/api/community/loans/{loan_id}/apply", self.apply_loan, methods=["POST"]),
            Route(
                "/api/community/transactions/{user_id}", self.list_transactions, methods=["GET"]
            ),
            Route("/api/community/transactions", self.create_transaction, methods=["POST"]),
            Route("/api/community/calls/{user_id}", self.call_logs, methods=["GET"]),
        ]

    async def healthz(self, _request: Request) -> Response:
        """Health check endpoint for load balancers and monitoring."""
        return Response(content="Ok", media_type="text/plain")

    async def online_users(self, _request: Request) -> JSONResponse:
        return JSONResponse({"data": [record.to_wire() for record in self.registry.snapshot()]})

    async def list_posts(self, _request: Request) -> JSONResponse:
        """Newest feed posts with their current vote totals."""
        posts = await self.post_store.list_posts(limit=self.feed_posts_limit)
        return JSONResponse(
            {"data": [_format_post(post, votes=tally.total_score) for post, tally in posts]}
        )

    async def list_messages(self, _request: Request) -> JSONResponse:
        """Chat history, oldest first."""
        messages = await self.message_store.recent(limit=self.chat_history_limit)
        return JSONResponse({"data": [_format_message(message) for message in messages]})

    async def create_post(self, request: Request) -> JSONResponse:
        try:
            body = CreatePostRequest.model_validate(await _read_json(request))
        except (ValueError, ValidationError) as e:
            return _invalid_payload(str(e))

        post = await self.post_store.create_post(
            CommunityPost(
                post_id=_new_id(),
                author_id=body.author_id,
                author_name=body.author_name or "Guest",
                author_avatar=body.author_avatar,
                content=body.content,
                image=body.image,
                created_at=datetime.now(UTC),
            )
        )
        return JSONResponse({"data": _format_post(post)}, status_code=201)

    async def vote(self, request: Request) -> JSONResponse:
        """Vote on a post; anonymous voters are identified by client IP."""
        post_id = request.path_params["post_id"]
        try:
            body = VoteRequest.model_validate(await _read_json(request))
        except (ValueError, ValidationError) as e:
            return _invalid_payload(str(e))

        voter_id = body.voter_id or extract_client_ip(request)
        try:
            result = await self.votes.vote(post_id, voter_id, body.vote)
        except HubError as e:
            return _error_response(e)
        return JSONResponse({"votes": result.total_score, "userVote": result.user_choice})

    async def list_labour_posts(self, _request: Request) -> JSONResponse:
        posts = await self.labour_store.list_active(limit=self.labour_posts_limit)
        return JSONResponse({"data": [_format_labour_post(post, slots) for post, slots in posts]})

    async def create_labour_post(self, request: Request) -> JSONResponse:
        try:
            body = CreateLabourPostRequest.model_validate(await _read_json(request))
        except (ValueError, ValidationError) as e:
            return _invalid_payload(str(e))

        post = LabourPost(
            post_id=_new_id(),
            farmer_name=body.farmer_name,
            farmer_id=body.farmer_id,
            work_type=body.work_type,
            location=body.location,
            duration=body.duration,
            offered_wage=body.offered_wage,
            labour_count=body.labour_count,
            notes=body.notes,
            created_at=datetime.now(UTC),
        )
        slots = await self.labour_store.create_post(post)
        logger.info(f"Labour post {post.post_id} created with {slots.remaining_slots} slot(s)")
        return JSONResponse({"data": _format_labour_post(post, slots)}, status_code=201)

    async def apply_labour(self, request: Request) -> JSONResponse:
        """Apply for a labour job; the applicant falls back to the client IP."""
        post_id = request.path_params["post_id"]
        try:
            body = LabourApplyRequest.model_validate(await _read_json(request))
        except (ValueError, ValidationError) as e:
            return _invalid_payload(str(e))

        applicant_id = body.applicant_id or extract_client_ip(request)
        try:
            result = await self.labour_slots.apply(post_id, applicant_id, body.applicant_name)
        except HubError as e:
            return _error_response(e)
        return JSONResponse(
            {
                "success": True,
                "remainingCount": result.remaining_slots,
                "status": "filled" if result.filled else "active",
            }
        )

    async def list_loans(self, _request: Request) -> JSONResponse:
        loans = await self.loan_store.list_loans(limit=self.loans_limit)
        return JSONResponse({"data": [_format_loan(loan) for loan in loans]})

    async def create_loan(self, request: Request) -> JSONResponse:
        try:
            body = CreateLoanRequest.model_validate(await _read_json(request))
        except (ValueError, ValidationError) as e:
            return _invalid_payload(str(e))

        loan = await self.loan_store.create_loan(
            LoanOffer(
                loan_id=_new_id(),
                lender=body.lender or "Anonymous",
                lender_id=body.lender_id,
                amount=body.amount,
                interest=body.interest,
                duration_days=body.duration,
                collateral=body.collateral,
                created_at=datetime.now(UTC),
            )
        )
        return JSONResponse({"data": _format_loan(loan)}, status_code=201)

    async def apply_loan(self, request: Request) -> JSONResponse:
        loan_id = request.path_params["loan_id"]
        try:
            body = LoanApplyRequest.model_validate(await _read_json(request))
        except (ValueError, ValidationError) as e:
            return _invalid_payload(str(e))

        try:
            loan = await self.loan_claims.claim(loan_id, body.borrower, body.borrower_id)
        except HubError as e:
            return _error_response(e)
        return JSONResponse({"success": True, "status": loan.status.value})

    async def list_transactions(self, request: Request) -> JSONResponse:
        """A member's newest transactions and the balance over their whole history."""
        user_id = request.path_params["user_id"]
        history = await self.transaction_store.list_for_user(user_id)
        return JSONResponse(
            {
                "data": [
                    _format_transaction(tx, tx.direction_for(user_id))
                    for tx in history[: self.transactions_limit]
                ],
                "balance": running_balance(user_id, history, self.starting_balance),
            }
        )

    async def create_transaction(self, request: Request) -> JSONResponse:
        try:
            body = CreateTransactionRequest.model_validate(await _read_json(request))
        except (ValueError, ValidationError) as e:
            return _invalid_payload(str(e))

        tx = await self.transaction_store.record(
            PaymentTransaction(
                transaction_id=_new_id(),
                sender_name=body.sender_name,
                sender_id=body.sender_id,
                recipient_name=body.recipient_name,
                recipient_id=body.recipient_id,
                amount=body.amount,
                created_at=datetime.now(UTC),
            )
        )
        logger.info(f"Transaction {tx.transaction_id}: {tx.amount} to {tx.recipient_name}")
        return JSONResponse(
            {"data": _format_transaction(tx, "sent")}, status_code=201
        )

    async def call_logs(self, request: Request) -> JSONResponse:
        user_id = request.path_params["user_id"]
        entries = await self.call_log_store.list_for_user(user_id, limit=self.call_log_limit)
        return JSONResponse(
            {"data": [entry.model_dump(by_alias=True, mode="json") for entry in entries]}
        )
