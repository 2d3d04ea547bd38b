# -*- coding: utf-8 -*-
"""English translations."""

EN_TRANSLATIONS = {
    # Dialogs
    "dialog.error": "Error",
    "dialog.warning": "Warning",
    "dialog.success": "Success",
    "dialog.confirm": "Confirm",
    "dialog.info": "Information",

    # Memorial
    "memorial.untitled": "Untitled Memorial",

    # Save Status
    "save_status.just_saved": "Just saved",
    "save_status.seconds_ago": "{count} seconds ago",
    "save_status.minute_ago": "1 minute ago",
    "save_status.minutes_ago": "{count} minutes ago",
    "save_status.hour_ago": "1 hour ago",
    "save_status.hours_ago": "{count} hours ago",

    # Wizard Steps
    "wizard.step.basic_info": "Basic Information",
    "wizard.step.basic_info.description": "Name, dates and a featured photo",
    "wizard.step.headline": "Headline",
    "wizard.step.headline.description": "A short line that captures who they were",
    "wizard.step.obituary": "Obituary",
    "wizard.step.obituary.description": "Their life story",
    "wizard.step.service": "Service Details",
    "wizard.step.service.description": "Visitation, funeral, burial or celebration of life",
    "wizard.step.donation": "Donations",
    "wizard.step.donation.description": "Where people can give in their memory",
    "wizard.step.gallery": "Photo Gallery",
    "wizard.step.gallery.description": "Photos and videos",
    "wizard.step.guestbook": "Guestbook",
    "wizard.step.guestbook.description": "How visitors can leave condolences",
    "wizard.step.privacy": "Privacy",
    "wizard.step.privacy.description": "Who can see the memorial and where",
    "wizard.step.review": "Review & Publish",
    "wizard.step.review.description": "Check everything before publishing",

    # Wizard - Validation Errors
    "validation.first_name.required": "First name is required.",
    "validation.last_name.required": "Last name is required.",
    "validation.date_of_birth.required": "Date of birth is required.",
    "validation.date_of_death.required": "Date of death is required.",
    "validation.dates.order": "Date of birth must be before date of death.",
    "validation.featured_image.required": "Please add a featured photo.",
    "validation.headline.min_length": "Headline must be at least {min} characters.",
    "validation.obituary.min_length": "Obituary must be at least {min} characters.",
    "validation.guestbook.choice": "Please choose whether to enable the guestbook.",
    "validation.privacy.level": "Please choose a privacy level.",
    "validation.privacy.custom_url": "Please choose a web address for the memorial.",
    "validation.review.incomplete": "Some required steps are incomplete.",

    # Wizard - Validation Warnings
    "warning.date_of_death.future": "Date of death is in the future.",
    "warning.privacy.password": "Password protected memorials need a password.",
    "warning.custom_url.format": "Web address can only contain lowercase letters, numbers and hyphens.",
    "warning.custom_url.length": "Web address must be between {min} and {max} characters.",
    "warning.guestbook.notify_email": "Add an e-mail address to receive guestbook notifications.",

    # Wizard - Flow
    "wizard.validation.failed": "Please complete \"{step}\" before continuing.",
    "wizard.resume.title": "Continue Your Memorial",
    "wizard.resume.message": "You have an unfinished memorial for {name} ({saved}). Would you like to continue editing it?",
    "wizard.resume.never_saved": "not saved yet",
    "wizard.exit.title": "Unsaved Changes",
    "wizard.exit.message": "You have unsaved changes. Would you like to save before leaving?",
    "wizard.save.success": "Your memorial has been saved.",
    "wizard.save.failed": "Your memorial could not be saved. Your changes are still here, please try again.",
    "wizard.publish.blocked": "Please complete the following steps before publishing:\n{steps}",
    "wizard.publish.requested": "Your memorial is being published.",

    # Preview
    "preview.name.placeholder": "Your Loved One",
    "preview.headline.placeholder": "A headline will appear here",
    "preview.obituary.placeholder": "The obituary will appear here",
    "preview.age": "Age {age}",
    "preview.services.more": "+{count} more",
    "preview.gallery.more": "+{count} more items",
    "preview.donation": "In lieu of flowers, donations may be made to: {target}",
    "preview.guestbook.enabled": "Guestbook open for condolences",
    "preview.guestbook.disabled": "Guestbook disabled",
    "preview.privacy.public": "Public",
    "preview.privacy.private": "Private",
    "preview.privacy.password": "Password protected",
    "preview.privacy.unset": "Privacy not set",
    "preview.footer": "This is a preview of your memorial page. The final version may look slightly different.",

    # Service types
    "service.visitation": "Visitation",
    "service.funeral": "Funeral Service",
    "service.burial": "Burial",
    "service.celebration": "Celebration of Life",

    # Error Messages - Draft
    "error.draft.not_found": "This memorial could not be found.",
    "error.draft.load_failed": "Failed to load the memorial.",
    "error.draft.create_failed": "Failed to start a new memorial.",
    "error.draft.save_failed": "Failed to save the memorial.",
    "error.draft.publish_failed": "Failed to publish the memorial.",

    # Error Messages - API
    "error.api.connection": "Connection error. Please check your internet connection.",
    "error.api.timeout": "Connection timeout. Please try again.",
    "error.api.unauthorized": "Unauthorized. Please login again.",
    "error.api.forbidden": "Access forbidden.",
    "error.api.rate_limited": "Saving too frequently. Please wait a moment.",
    "error.api.server": "The server could not complete the request. Please try again.",
}
