from django.urls import path

from .views import ContactActionView

app_name = "listman"

urlpatterns = [
    path("contacts/actions/", ContactActionView.as_view(), name="contact-actions"),
]
