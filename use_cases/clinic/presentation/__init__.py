"""
Clinic Presentation Layer.

Contains the WidgetComposers for doctor cards and roster rows.
"""

from .composer import AppointmentRowComposer, DoctorCardComposer, RenderedCard

__all__ = ["AppointmentRowComposer", "DoctorCardComposer", "RenderedCard"]
