"""Static message texts (HTML parse mode)."""

from askbot.core.formatting import quote

COMMANDS_HELP = (
    "<b>Available Commands:</b>\n\n"
    "/ask - Send your question to the channel\n"
    "/myprofile - See your points and rank\n"
    "/settings - Configure your settings\n"
    "/help - Get help and support"
)


def welcome_text(first_name: str, returning: bool = False) -> str:
    greeting = "Welcome back!" if returning else "Welcome to Ask Anonymous!"
    return f"🤖 <b>Hi {quote(first_name)}, {greeting}</b>\n\n{COMMANDS_HELP}"


ASK_MENU = "📝 <b>Ask a Question</b>\n\n<i>Your identity stays completely anonymous.</i>"

QUESTION_PROMPT = (
    "📝 <b>Start a Question</b>\n\n"
    "Please type your question below:\n\n"
    "<i>Your identity will be completely anonymous</i>"
)

CHOOSE_TOPIC = "📂 <b>Choose Question Category</b>\n\nSelect a category for your question:"

CUSTOM_TOPIC_PROMPT = "🎯 <b>Custom Topic</b>\n\nPlease type your topic:"

FEEDBACK_PROMPT = "📤 <b>Send Feedback</b>\n\nPlease type your feedback, suggestions, or report issues below:"

FEEDBACK_SENT = "✅ <b>Feedback Sent!</b>\n\nThank you for your feedback. We'll review it soon."

NO_SESSION = "Please use /start to begin or use the menu buttons."

SETTINGS = "⚙️ <b>Settings</b>\n\nConfigure your preferences."

HELP = (
    "❓ <b>Help &amp; Support</b>\n\n"
    "Need assistance?\n\n"
    "• How to ask questions anonymously\n"
    "• How to answer questions\n"
    "• Privacy and safety guidelines\n"
    "• Report inappropriate content\n"
    "• Contact support"
)

HOW_TO_ASK = (
    "📖 <b>How to Ask Questions</b>\n\n"
    "1. Tap \"Ask Question\" or use /ask\n"
    "2. Select \"Start a Question\"\n"
    "3. Type your question\n"
    "4. Choose a category\n"
    "5. Submit for approval\n"
    "6. Wait for admin approval (usually within 24 hours)\n\n"
    "<i>Your identity is completely anonymous!</i>"
)

HOW_TO_ANSWER = (
    "💬 <b>How to Answer Questions</b>\n\n"
    "1. Browse questions in the channel\n"
    "2. Tap the \"Answer\" button under any question\n"
    "3. Type your answer in the bot\n"
    "4. Submit your response\n\n"
    "<i>Answers are visible to everyone in the bot.</i>\n"
    "<i>You earn 5 points for each answer!</i>"
)

SAFETY_GUIDE = (
    "🛡️ <b>Safety Guide</b>\n\n"
    "✅ <b>Do:</b>\n"
    "• Be respectful and kind\n"
    "• Ask meaningful questions\n"
    "• Provide helpful answers\n"
    "• Report inappropriate content\n\n"
    "❌ <b>Don't:</b>\n"
    "• Share personal information\n"
    "• Harass or bully other users\n"
    "• Post spam or advertisements\n"
    "• Impersonate others\n\n"
    "<b>Reporting:</b>\nUse Contact Support to report any issues."
)

CONTACT_SUPPORT = (
    "📞 <b>Contact Support</b>\n\n"
    "Use the feedback form below to reach the admin.\n\n"
    "We typically respond within 24 hours."
)

GENERIC_ERROR = "❌ An error occurred. Please try again."
