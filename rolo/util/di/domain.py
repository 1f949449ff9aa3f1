"""Domain layer DI providers."""

from dishka import Scope, provide

from rolo.config import InvitationSettings, SubscriptionSettings
from rolo.domain.repository import (
    AuditLogRepository,
    AuditSink,
    CollaboratorRepository,
    CommunityRepository,
    InviteRepository,
    SubscriptionRepository,
    TransactionManager,
)
from rolo.domain.service import (
    AccessControlService,
    AccessEventBus,
    AuditService,
    CollaboratorService,
    CommunityService,
    IdentityService,
    IdentityVerifier,
    InviteService,
    NotificationService,
    Notifier,
    SeatLimitService,
    SubscriptionService,
)
from rolo.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    The event bus is shared by the whole app so subscriptions outlive requests.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    def get_event_bus(self) -> AccessEventBus:
        """Provide the app-wide access event channel."""
        return AccessEventBus()

    @provide
    def get_identity_service(self, verifier: IdentityVerifier) -> IdentityService:
        """Provide identity domain service."""
        return IdentityService(verifier=verifier)

    @provide
    def get_notification_service(self, notifier: Notifier) -> NotificationService:
        """Provide notification domain service."""
        return NotificationService(notifier=notifier)

    @provide
    def get_audit_service(
        self, audit_sink: AuditSink, audit_log_repository: AuditLogRepository
    ) -> AuditService:
        """Provide audit domain service."""
        return AuditService(
            audit_sink=audit_sink, audit_log_repository=audit_log_repository
        )

    @provide
    def get_community_service(
        self,
        community_repository: CommunityRepository,
        transactions: TransactionManager,
    ) -> CommunityService:
        """Provide community domain service."""
        return CommunityService(
            community_repository=community_repository, transactions=transactions
        )

    @provide
    def get_collaborator_service(
        self,
        collaborator_repository: CollaboratorRepository,
        transactions: TransactionManager,
    ) -> CollaboratorService:
        """Provide collaborator domain service."""
        return CollaboratorService(
            collaborator_repository=collaborator_repository, transactions=transactions
        )

    @provide
    def get_subscription_service(
        self,
        subscription_repository: SubscriptionRepository,
        transactions: TransactionManager,
        settings: SubscriptionSettings,
    ) -> SubscriptionService:
        """Provide subscription domain service."""
        return SubscriptionService(
            subscription_repository=subscription_repository,
            transactions=transactions,
            settings=settings,
        )

    @provide
    def get_seat_limit_service(
        self,
        collaborator_service: CollaboratorService,
        subscription_service: SubscriptionService,
    ) -> SeatLimitService:
        """Provide seat limit enforcer."""
        return SeatLimitService(
            collaborator_service=collaborator_service,
            subscription_service=subscription_service,
        )

    @provide
    def get_access_control_service(
        self,
        community_service: CommunityService,
        collaborator_service: CollaboratorService,
        seat_limit_service: SeatLimitService,
        transactions: TransactionManager,
        audit_service: AuditService,
        event_bus: AccessEventBus,
        settings: SubscriptionSettings,
    ) -> AccessControlService:
        """Provide community access controller."""
        return AccessControlService(
            community_service=community_service,
            collaborator_service=collaborator_service,
            seat_limit_service=seat_limit_service,
            transactions=transactions,
            audit_service=audit_service,
            event_bus=event_bus,
            settings=settings,
        )

    @provide
    def get_invite_service(
        self,
        invite_repository: InviteRepository,
        access_control: AccessControlService,
        transactions: TransactionManager,
        audit_service: AuditService,
        event_bus: AccessEventBus,
        settings: InvitationSettings,
    ) -> InviteService:
        """Provide invite domain service."""
        return InviteService(
            invite_repository=invite_repository,
            access_control=access_control,
            transactions=transactions,
            audit_service=audit_service,
            event_bus=event_bus,
            settings=settings,
        )
