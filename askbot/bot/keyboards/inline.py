from typing import Sequence

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from askbot.core.topics import TOPICS
from askbot.core.transport import Action, Keyboard


def to_markup(keyboard: Sequence[Sequence[Action]]) -> InlineKeyboardMarkup | None:
    """Convert action rows to an aiogram inline keyboard."""
    rows = [
        [
            InlineKeyboardButton(text=action.label, url=action.url)
            if action.url
            else InlineKeyboardButton(text=action.label, callback_data=action.token)
            for action in row
        ]
        for row in keyboard
        if row
    ]
    if not rows:
        return None
    return InlineKeyboardMarkup(inline_keyboard=rows)


def get_main_menu_keyboard() -> Keyboard:
    return [
        [Action("📝 Ask Question", token="ASK_QUESTION")],
        [Action("👤 My Profile", token="USER_PROFILE")],
        [Action("⚙️ Settings", token="MORE_OPTIONS")],
        [Action("❓ Help", token="HELP_MENU")],
    ]


def get_ask_menu_keyboard() -> Keyboard:
    return [
        [Action("📝 Start a Question", token="START_QUESTION")],
        [Action("🔍 Browse Questions", token="BROWSE_QUESTIONS")],
        [Action("📤 Send Feedback", token="SEND_FEEDBACK")],
        [Action("⬅️ Back", token="BACK_TO_MAIN")],
    ]


def get_cancel_keyboard() -> Keyboard:
    return [[Action("🚫 Cancel", token="BACK_TO_MAIN")]]


def get_home_keyboard() -> Keyboard:
    return [[Action("🏠 Main Menu", token="BACK_TO_MAIN")]]


def get_topics_keyboard() -> Keyboard:
    """One button per topic; the last one asks for a custom topic."""
    keyboard = [[Action(topic, token=f"TOPIC_{index}")] for index, topic in enumerate(TOPICS)]
    keyboard.append([Action("🚫 Cancel", token="BACK_TO_MAIN")])
    return keyboard


def get_custom_topic_keyboard() -> Keyboard:
    return [[Action("⬅️ Back to Topics", token="SHOW_TOPICS")]]


def get_preview_keyboard() -> Keyboard:
    return [
        [Action("✏️ Edit Question", token="EDIT_QUESTION")],
        [Action("📤 Submit Question", token="SUBMIT_QUESTION")],
        [Action("🚫 Cancel", token="BACK_TO_MAIN")],
    ]


def get_edit_keyboard() -> Keyboard:
    return [[Action("🚫 Cancel Edit", token="CANCEL_EDIT")]]


def get_retry_keyboard(token: str) -> Keyboard:
    return [
        [Action("✏️ Try Again", token=token)],
        [Action("🏠 Main Menu", token="BACK_TO_MAIN")],
    ]


def get_question_card_keyboard(question_id: int) -> Keyboard:
    return [
        [Action("💬 Answer Question", token=f"CHANNEL_ANSWER_{question_id}")],
        [Action("🔍 View Answers", token=f"CHANNEL_BROWSE_{question_id}")],
        [Action("🏠 Main Menu", token="BACK_TO_MAIN")],
    ]


def get_vote_row(answer_id: int, position: int, votes: int, my_vote: int | None) -> list[Action]:
    """Vote buttons for one answer; pressing the active button removes the vote."""
    if my_vote == 1:
        up = Action(f"#{position} 👍 {votes} (You)", token=f"VOTE_NONE_{answer_id}")
    else:
        up = Action(f"#{position} 👍 {votes}", token=f"VOTE_UP_{answer_id}")
    if my_vote == -1:
        down = Action("👎 (You)", token=f"VOTE_NONE_{answer_id}")
    else:
        down = Action("👎", token=f"VOTE_DOWN_{answer_id}")
    return [up, down]


def get_subscription_toggle(question_id: int, subscribed: bool) -> list[Action]:
    if subscribed:
        return [Action("🔕 Unsubscribe from Question", token=f"UNSUBSCRIBE_{question_id}")]
    return [Action("🔔 Subscribe to Question", token=f"SUBSCRIBE_{question_id}")]


def get_profile_keyboard() -> Keyboard:
    return [
        [Action("🏆 Leaderboard", token="LEADERBOARD")],
        [Action("🔔 Notifications", token="NOTIFICATIONS_MENU")],
        [Action("⬅️ Main Menu", token="BACK_TO_MAIN")],
    ]


def get_settings_keyboard() -> Keyboard:
    return [
        [Action("🔔 Notifications", token="NOTIFICATIONS_MENU")],
        [Action("📊 Statistics", token="BOT_STATS")],
        [Action("👥 Subscriptions", token="SUBSCRIPTION_SETTINGS")],
        [Action("⬅️ Main Menu", token="BACK_TO_MAIN")],
    ]


def get_help_keyboard() -> Keyboard:
    return [
        [Action("📖 How to Ask", token="HOW_TO_ASK")],
        [Action("💬 How to Answer", token="HOW_TO_COMMENT")],
        [Action("🛡️ Safety Guide", token="SAFETY_GUIDE")],
        [Action("📞 Contact Support", token="CONTACT_SUPPORT")],
        [Action("⬅️ Main Menu", token="BACK_TO_MAIN")],
    ]


def get_back_to_help_keyboard(with_feedback: bool = False) -> Keyboard:
    keyboard = []
    if with_feedback:
        keyboard.append([Action("📤 Send Feedback", token="SEND_FEEDBACK")])
    keyboard.append([Action("⬅️ Back to Help", token="HELP_MENU")])
    return keyboard


def get_admin_keyboard() -> Keyboard:
    return [
        [Action("📋 View Pending Questions", token="ADMIN_PENDING")],
        [Action("📊 Full Statistics", token="ADMIN_STATS")],
        [Action("⬅️ Main Menu", token="BACK_TO_MAIN")],
    ]


def get_review_keyboard(question_id: int) -> list[Action]:
    return [
        Action("✅ Approve", token=f"APPROVE_{question_id}"),
        Action("❌ Reject", token=f"REJECT_{question_id}"),
    ]
