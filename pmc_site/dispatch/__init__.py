from pmc_site.dispatch.dispatcher import (NotificationDispatcher, DispatchOutcome, DispatchFailed, ValidationFailed,
                                          REQUIRED_FIELDS)
