from django.apps import AppConfig


class CommunityConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'community'

    def ready(self):
        from accounts.identity import observe_session

        from .presence import mark_offline_everywhere

        def leave_chats_on_sign_out(current, previous):
            if current is None and previous is not None:
                mark_offline_everywhere(previous.user_id)

        self.unobserve_session = observe_session(leave_chats_on_sign_out)
