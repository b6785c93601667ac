from django.urls import path
from tracking_api.views import (
    TrackPackageView,
    TrackingEventsView,
    PackageListView,
    PackageStatsView,
    PackageLocationView,
    PackageStatusView,
)

urlpatterns = [
    path('api/v1/track/<str:tracking_number>/', TrackPackageView.as_view(), name='track-package'),
    path('api/v1/track/<str:tracking_number>/events/', TrackingEventsView.as_view(), name='track-events'),
    path('api/v1/packages/', PackageListView.as_view(), name='package-list'),
    path('api/v1/packages/stats/', PackageStatsView.as_view(), name='package-stats'),
    path('api/v1/packages/<str:package_id>/location/', PackageLocationView.as_view(), name='package-location'),
    path('api/v1/packages/<str:package_id>/status/', PackageStatusView.as_view(), name='package-status'),
]
