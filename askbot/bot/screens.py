"""
Read-only screens: browsing, profile, leaderboard, notifications, subscriptions,
statistics and the operator panel.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from askbot.bot.keyboards.inline import (
    get_admin_keyboard,
    get_profile_keyboard,
    get_review_keyboard,
    get_subscription_toggle,
    get_vote_row,
)
from askbot.core.answers import AnswerBoard, AnswerPage
from askbot.core.formatting import preview, quote
from askbot.core.notifications import NotificationDispatcher
from askbot.core.ranking import get_leaderboard, get_profile
from askbot.core.statistics import admin_stats, community_stats
from askbot.core.subscriptions import SubscriptionRegistry
from askbot.core.transport import Action, Reply
from askbot.db.models import NotificationType
from askbot.db.repositories import question_repo

MEDALS = {1: "🥇", 2: "🥈", 3: "🥉"}

NOTIFICATION_TITLES = {
    NotificationType.NEW_ANSWER: ("New Answer", "On a question you follow"),
    NotificationType.QUESTION_APPROVED: ("Question Approved", "Your question is now live!"),
    NotificationType.VOTE_RECEIVED: ("New Vote", "On your answer"),
}


def fmt_date(value) -> str:
    return value.strftime("%Y-%m-%d") if value else "-"


def channel_url(channel: str) -> str | None:
    if channel.startswith("@"):
        return f"https://t.me/{channel.lstrip('@')}"
    return None


async def recent_questions_screen(session: AsyncSession, board: AnswerBoard, channel: str = "") -> Reply:
    questions = await board.recent_questions(session)
    url = channel_url(channel)

    if not questions:
        keyboard = [[Action("📝 Ask Question", token="ASK_QUESTION")]]
        if url:
            keyboard.append([Action("📢 View Channel", url=url)])
        keyboard.append([Action("⬅️ Back", token="BACK_TO_MAIN")])
        return Reply("🔍 <b>No Questions Yet</b>\n\nNo approved questions yet. Be the first to ask!", keyboard)

    lines = ["🔍 <b>Recent Questions</b>\n", f"<i>Top {len(questions)} recent questions</i>\n"]
    keyboard = []
    for position, question in enumerate(questions, start=1):
        lines.append(
            f"<b>{position}. {quote(question.topic)}</b>\n"
            f"{preview(question.text, 80)}\n"
            f"💬 {question.answer_count} answers • 📅 {fmt_date(question.created_at)}\n"
        )
        keyboard.append([Action(f"🔍 {position}. View Answers", token=f"CHANNEL_BROWSE_{question.id}")])

    if url:
        keyboard.append([Action("📢 View in Channel", url=url)])
    keyboard.append([Action("🔄 Refresh", token="BROWSE_QUESTIONS")])
    keyboard.append([Action("⬅️ Back", token="BACK_TO_MAIN")])
    return Reply("\n".join(lines), keyboard)


def answers_screen(page: AnswerPage) -> Reply:
    question = page.question
    if not page.answers:
        return Reply(
            "🔍 <b>No Answers Yet</b>\n\n"
            f"<b>Question:</b> {quote(question.text)}\n\n"
            "Be the first to answer this question!",
            [
                [Action("💬 Add Your Answer", token=f"CHANNEL_ANSWER_{question.id}")],
                get_subscription_toggle(question.id, page.subscribed),
                [Action("🏠 Main Menu", token="BACK_TO_MAIN")],
            ],
        )

    plural = "s" if page.total != 1 else ""
    lines = [
        "🔍 <b>Answers for This Question</b>\n",
        f"<b>Question:</b> {quote(question.text)}\n",
        f"<b>{page.total} Answer{plural}</b> • {'🔔 Subscribed' if page.subscribed else '🔕 Not subscribed'}\n",
    ]
    keyboard = []
    for position, answer in enumerate(page.answers, start=1):
        lines.append(
            f"<b>#{position}</b> ({answer.votes:+d})\n"
            f"{quote(answer.text)}\n"
            f"📅 {fmt_date(answer.created_at)}\n"
        )
        keyboard.append(get_vote_row(answer.id, position, answer.votes, page.my_votes.get(answer.id)))

    keyboard.append([Action("💬 Add Your Answer", token=f"CHANNEL_ANSWER_{question.id}")])
    keyboard.append(get_subscription_toggle(question.id, page.subscribed))
    keyboard.append([Action("🏠 Main Menu", token="BACK_TO_MAIN")])
    return Reply("\n".join(lines), keyboard)


async def profile_screen(session: AsyncSession, user_id: int) -> Reply:
    profile = await get_profile(session, user_id)
    return Reply(
        "👤 <b>My Profile</b>\n\n"
        f"<b>{quote(profile.username)}</b>\n\n"
        "📊 <b>Stats:</b>\n"
        f"⭐ Points: {profile.points}\n"
        f"❓ Questions Asked: {profile.questions_asked}\n"
        f"💬 Answers Given: {profile.answers_given}\n\n"
        "🏆 <b>Ranking:</b>\n"
        f"📈 Rank: {profile.rank}/{profile.total_users}\n"
        f"📅 Member Since: {fmt_date(profile.join_date)}",
        get_profile_keyboard(),
    )


async def leaderboard_screen(session: AsyncSession) -> Reply:
    entries = await get_leaderboard(session)
    lines = ["🏆 <b>Community Leaderboard</b>\n", "<b>Top Contributors</b>\n"]
    if not entries:
        lines.append("No contributors yet.")
    for entry in entries:
        medal = MEDALS.get(entry.position, f"{entry.position}.")
        lines.append(
            f"{medal} <b>{quote(entry.username)}</b>\n"
            f"   ⭐ {entry.points} pts • ❓ {entry.questions_asked} • 💬 {entry.answers_given}\n"
        )
    return Reply(
        "\n".join(lines),
        [[Action("👤 My Profile", token="USER_PROFILE")], [Action("⬅️ Back", token="BACK_TO_MAIN")]],
    )


async def notifications_screen(session: AsyncSession, dispatcher: NotificationDispatcher, user_id: int) -> Reply:
    notifications, unread = await dispatcher.recent(session, user_id)

    if not notifications:
        text = (
            "🔔 <b>Notifications</b>\n\n"
            "No notifications yet.\n\n"
            "You'll get notified when:\n"
            "• Someone answers a question you follow\n"
            "• Your questions get approved\n"
            "• Your answers get votes"
        )
        keyboard = []
    else:
        lines = ["🔔 <b>Notifications</b>\n", f"<b>{unread} unread</b>\n"]
        keyboard = []
        for notification in notifications:
            title, subtitle = NOTIFICATION_TITLES[notification.kind]
            status = "✅" if notification.is_read else "🔔"
            lines.append(f"{status} <b>{title}</b> - {fmt_date(notification.created_at)}\n{subtitle}\n")
            if not notification.is_read:
                keyboard.append([Action(f"✅ Mark read: {title} #{notification.id}", token=f"MARK_READ_{notification.id}")])
        if unread:
            keyboard.append([Action("📁 Mark All as Read", token="MARK_ALL_READ")])
        text = "\n".join(lines)

    keyboard.extend([
        [Action("📝 Ask Question", token="ASK_QUESTION")],
        [Action("👤 My Profile", token="USER_PROFILE")],
        [Action("⬅️ Back", token="MORE_OPTIONS")],
    ])
    return Reply(text, keyboard)


async def subscriptions_screen(session: AsyncSession, registry: SubscriptionRegistry, user_id: int) -> Reply:
    subscriptions = await registry.list_for_user(session, user_id)
    if not subscriptions:
        return Reply(
            "👥 <b>Subscription Settings</b>\n\n"
            "You're not subscribed to any questions yet.\n\n"
            "You'll auto-subscribe to questions you answer.",
            [[Action("⬅️ Back", token="MORE_OPTIONS")]],
        )

    lines = ["👥 <b>Subscription Settings</b>\n", f"<b>Your Subscriptions ({len(subscriptions)}):</b>\n"]
    for position, (subscription, question) in enumerate(subscriptions, start=1):
        lines.append(f"{position}. {preview(question.text, 50)}\n   └── 📅 Since: {fmt_date(subscription.created_at)}\n")
    return Reply(
        "\n".join(lines),
        [
            [Action("🗑️ Manage Subscriptions", token="MANAGE_SUBSCRIPTIONS")],
            [Action("⬅️ Back", token="MORE_OPTIONS")],
        ],
    )


async def manage_subscriptions_screen(session: AsyncSession, registry: SubscriptionRegistry, user_id: int) -> Reply:
    subscriptions = await registry.list_for_user(session, user_id)
    lines = ["🗑️ <b>Manage Subscriptions</b>\n"]
    keyboard = []
    if not subscriptions:
        lines.append("You have no active subscriptions.")
    for position, (_, question) in enumerate(subscriptions, start=1):
        lines.append(f"{position}. {preview(question.text, 40)}")
        keyboard.append([Action(f"❌ Unsubscribe from Question {position}", token=f"UNSUBSCRIBE_{question.id}")])
    keyboard.append([Action("⬅️ Back to Subscriptions", token="SUBSCRIPTION_SETTINGS")])
    return Reply("\n".join(lines), keyboard)


async def stats_screen(session: AsyncSession) -> Reply:
    stats = await community_stats(session)
    return Reply(
        "📊 <b>Bot Statistics</b>\n\n"
        "<b>Platform Overview:</b>\n\n"
        f"✅ Approved Questions: {stats.questions}\n"
        f"💬 Total Answers: {stats.answers}\n"
        f"👥 Total Users: {stats.users}\n"
        f"👍 Total Votes: {stats.votes}\n\n"
        "<b>Activity:</b>\n\n"
        f"📊 Answers per question: {stats.answers_per_question:.1f}\n"
        f"👍 Votes per answer: {stats.votes_per_answer:.1f}",
        [[Action("⬅️ Back", token="MORE_OPTIONS")]],
    )


async def admin_panel_screen(session: AsyncSession) -> Reply:
    stats = await admin_stats(session)
    return Reply(
        "👑 <b>Admin Panel</b>\n\n"
        "<b>Statistics:</b>\n"
        f"⏳ Pending Questions: {stats.pending}\n"
        f"✅ Approved Questions: {stats.approved}\n"
        f"💬 Total Answers: {stats.answers}\n"
        f"👥 Total Users: {stats.users}",
        get_admin_keyboard(),
    )


async def admin_pending_screen(session: AsyncSession) -> Reply:
    pending = await question_repo.get_pending(session)
    back = [Action("⬅️ Back to Admin", token="ADMIN_PANEL")]
    if not pending:
        return Reply("📋 <b>No Pending Questions</b>\n\nAll questions have been reviewed.", [back])

    lines = ["⏳ <b>Pending Questions</b>\n", f"<b>{len(pending)} questions awaiting approval:</b>\n"]
    keyboard = []
    for position, question in enumerate(pending, start=1):
        lines.append(
            f"<b>{position}. {quote(question.topic)}</b>\n"
            f"Question: {preview(question.text, 80)}\n"
            f"ID: {question.id}\n"
        )
        keyboard.append(get_review_keyboard(question.id))
    keyboard.append([Action("🔄 Refresh", token="ADMIN_PENDING")])
    keyboard.append(back)
    return Reply("\n".join(lines), keyboard)


async def admin_stats_screen(session: AsyncSession) -> Reply:
    stats = await admin_stats(session)
    return Reply(
        "📈 <b>Admin Statistics</b>\n\n"
        "<b>Totals:</b>\n"
        f"📊 Total Questions: {stats.questions}\n"
        f"✅ Approved: {stats.approved}\n"
        f"⏳ Pending: {stats.pending}\n"
        f"💬 Total Answers: {stats.answers}\n"
        f"👥 Total Users: {stats.users}\n"
        f"👍 Total Votes: {stats.votes}\n"
        f"🔔 Subscriptions: {stats.subscriptions}\n\n"
        "<b>Today's Activity:</b>\n"
        f"📝 New Questions: {stats.questions_today}\n"
        f"💬 New Answers: {stats.answers_today}\n"
        f"👤 New Users: {stats.new_users_today}",
        [[Action("🔄 Refresh", token="ADMIN_STATS")], [Action("⬅️ Back to Admin", token="ADMIN_PANEL")]],
    )
