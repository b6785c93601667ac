from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.policy import Capability
from store.errors import NotFoundError
from tracking.progress import compute_progress
from tracking.static_map import build_static_map_url

from . import services
from .permissions import HasCapability
from .serializers import (
    GeoPointSerializer,
    LocationUpdateSerializer,
    PackageQuerySerializer,
    PackageSerializer,
    ProgressSerializer,
    StatusUpdateSerializer,
    TrackingEventSerializer,
)


def _map_url(route):
    try:
        return build_static_map_url(route)
    except ValueError:
        # no maps key configured, the page falls back to text only
        return None


class TrackPackageView(APIView):
    """
    Public tracking lookup.
    - status, route points, progress / ETA, static map link
    """
    permission_classes = [permissions.AllowAny]

    def get(self, request, tracking_number):
        package = services.get_package_service().get_package_by_tracking_number(tracking_number)
        if package is None:
            raise NotFoundError(f"No package found with tracking number {tracking_number}")

        route = package.route_snapshot()
        progress = compute_progress(route)

        return Response({
            "tracking_number": package.tracking_number,
            "status": package.status.value,
            "status_label": package.status_label,
            "delivered": route.delivered,
            "estimated_delivery_date": package.estimated_delivery_date,
            "origin": GeoPointSerializer(route.origin).data,
            "destination": GeoPointSerializer(route.destination).data,
            "current": GeoPointSerializer(route.current).data,
            "progress": ProgressSerializer(progress).data,
            "map_url": _map_url(route),
        })


class TrackingEventsView(APIView):
    """
    Public timeline for a tracking number, oldest event first.
    """
    permission_classes = [permissions.AllowAny]

    def get(self, request, tracking_number):
        package = services.get_package_service().get_package_by_tracking_number(tracking_number)
        if package is None:
            raise NotFoundError(f"No package found with tracking number {tracking_number}")
        return Response(TrackingEventSerializer(package.tracking_events, many=True).data)


class PackageListView(APIView):
    """
    Admin package table. Filters: status, search, limit, offset.
    """
    permission_classes = [HasCapability]
    required_capability = Capability.PACKAGES_VIEW

    def get(self, request):
        query = PackageQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        service = services.get_package_service(request.auth)
        if params.get("search"):
            packages = service.search_packages(
                params["search"],
                status=params.get("status"),
                limit=params.get("limit"),
                offset=params.get("offset"),
            )
        else:
            packages = service.get_packages(
                status=params.get("status"),
                limit=params.get("limit"),
                offset=params.get("offset"),
            )
        return Response(PackageSerializer(packages, many=True).data)


class PackageStatsView(APIView):
    permission_classes = [HasCapability]
    required_capability = Capability.REPORTS_VIEW

    def get(self, request):
        return Response(services.get_package_service(request.auth).get_package_stats())


class PackageLocationView(APIView):
    """
    Move a package's current position.
    """
    permission_classes = [HasCapability]
    required_capability = Capability.PACKAGES_UPDATE

    def patch(self, request, package_id):
        serializer = LocationUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        package = services.get_package_service(request.auth).update_package_location(
            package_id, data["lat"], data["lng"], data["label"]
        )
        return Response(PackageSerializer(package).data)


class PackageStatusView(APIView):
    """
    Change a package's status. Adds a timeline event.
    """
    permission_classes = [HasCapability]
    required_capability = Capability.PACKAGES_UPDATE

    def post(self, request, package_id):
        serializer = StatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        package = services.get_package_service(request.auth).update_package_status(
            package_id, data["status"], data.get("location") or None
        )
        return Response(PackageSerializer(package).data, status=status.HTTP_200_OK)
