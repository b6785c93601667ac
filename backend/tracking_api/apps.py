from django.apps import AppConfig


class TrackingApiConfig(AppConfig):
    name = "tracking_api"
    verbose_name = "Package tracking API"
