import logging
import time
from functools import cmp_to_key

import discord
from discord.ext import commands

from config import COMMAND_PREFIX, LOCAL_TZ, MAX_EMBED_PLAYERS
from engine import compute_view
from ladder import compare_ranks
from rankformat import (
    describe_progression,
    format_delta,
    format_rank,
    format_rank_short,
    rank_icon,
    time_ago,
    wr_bar,
)
from windows import WINDOW_OPTIONS, WindowOption, duration_since_local_reset, window_by_id

logger = logging.getLogger(__name__)

MODE_COLOR = {
    "today": 0x99AAB5,
    "24h": 0x57F287,
    "7d": 0x5865F2,
    "30d": 0xEB459E,
    "season": 0xFAA61A,
}


# --------------------
# Helpers
# --------------------

def today_window(now: int) -> WindowOption:
    """Window covering the current local day (resets at 3AM)."""
    return WindowOption("today", "Today", duration_since_local_reset(now, LOCAL_TZ))


def _name(players_by_id, player_id):
    p = players_by_id.get(player_id)
    return p.display_name if p else player_id


def _mover_line(arrow, mover, players_by_id):
    start, end = mover.start, mover.end
    return (
        f"{arrow} **{_name(players_by_id, mover.player_id)}** `{mover.delta:+d} LP` "
        f"({format_rank_short(start.tier, start.division)} → {format_rank_short(end.tier, end.division)})"
    )


def _summary_value(summary, players_by_id):
    lines = []
    if summary.best_gain is not None:
        lines.append(_mover_line("▲", summary.best_gain, players_by_id))
    if summary.best_loss is not None and summary.best_loss is not summary.best_gain:
        lines.append(_mover_line("▼", summary.best_loss, players_by_id))
    return "\n".join(lines) or "No movement yet"


def _ladder_row(players_by_id, player_id, points, now):
    first, last = points[0].point, points[-1].point
    parts = [
        f"{rank_icon(last.tier)} **{_name(players_by_id, player_id)}** "
        f"{format_rank(last.tier, last.division, last.league_points)}",
        f"`{describe_progression(first, last)}`",
        f"{len(points)} games",
    ]

    # last game delta; the first game in range has none
    if points[-1].delta is not None:
        parts.append(f"last `{format_delta(points[-1].delta)}`")

    total = last.total_games
    if total > 0:
        wr = (last.wins or 0) / total * 100
        parts.append(f"{wr_bar(wr)} {wr:.0f}%")

    parts.append(time_ago(last.ts, now))
    return " · ".join(parts)


# --------------------
# Embed builder
# --------------------

def build_movers_embed(view, players, window: WindowOption, now: int):
    players_by_id = {p.id: p for p in players}
    labels = {w.id: w.label for w in WINDOW_OPTIONS}

    embed = discord.Embed(
        title="📈 Ladder Movers",
        description=f"**{window.label}**",
        color=MODE_COLOR.get(window.id, 0x5865F2),
    )

    for summary in view.range_summaries:
        embed.add_field(
            name=f"🔥 {labels.get(summary.window_id, summary.window_id)}",
            value=_summary_value(summary, players_by_id),
            inline=True,
        )

    series = list(view.series_by_player.items())
    series.sort(key=cmp_to_key(lambda a, b: compare_ranks(a[1][-1].point, b[1][-1].point)))

    rows = []
    for pid, points in series[:MAX_EMBED_PLAYERS]:
        rows.append(_ladder_row(players_by_id, pid, points, now))

    embed.add_field(
        name="📊 Ladder",
        value="\n".join(rows) if rows else "No ranking history available.",
        inline=False,
    )

    top = next((s.best_gain for s in view.range_summaries if s.best_gain is not None), None)
    if top is not None:
        icon = getattr(players_by_id.get(top.player_id), "icon_url", None)
        if icon:
            embed.set_thumbnail(url=icon)

    open_windows = [labels.get(wid, wid) for wid, ok in view.availability_by_window.items() if ok]
    embed.set_footer(text="Data: " + (", ".join(open_windows) if open_windows else "none yet"))
    return embed


def render_movers(load_inputs, window: WindowOption):
    """
    load_inputs() -> (players, snapshots, cutoffs); fetching and storage live
    outside this module.
    """
    players, snapshots, cutoffs = load_inputs()
    now = int(time.time() * 1000)
    view = compute_view(snapshots, cutoffs, window, 1, now)
    return build_movers_embed(view, players, window, now)


# --------------------
# View (Buttons)
# --------------------

BUTTON_STYLE = {
    "today": discord.ButtonStyle.secondary,
    "7d": discord.ButtonStyle.primary,
    "season": discord.ButtonStyle.success,
}


class MoversView(discord.ui.View):
    """One button for the local day plus one per configured window."""

    def __init__(self, load_inputs, window_options=WINDOW_OPTIONS):
        super().__init__(timeout=None)
        self.load_inputs = load_inputs

        today = discord.ui.Button(label="Today", style=BUTTON_STYLE["today"], custom_id="movers:today")
        today.callback = self._callback_for(None)
        self.add_item(today)

        for option in window_options:
            button = discord.ui.Button(
                label=option.label,
                style=BUTTON_STYLE.get(option.id, discord.ButtonStyle.secondary),
                custom_id=f"movers:{option.id}",
            )
            button.callback = self._callback_for(option)
            self.add_item(button)

    def _callback_for(self, option):
        async def callback(interaction: discord.Interaction):
            window = option if option is not None else today_window(int(time.time() * 1000))
            await self._safe_update(interaction, window)

        return callback

    async def _safe_update(self, interaction, window):
        try:
            await interaction.response.edit_message(
                embed=render_movers(self.load_inputs, window),
                view=self,
            )
        except discord.NotFound:
            logger.debug("movers interaction expired")


# --------------------
# Command
# --------------------

def make_bot() -> commands.Bot:
    intents = discord.Intents.default()
    intents.message_content = True  # must also be enabled in the Developer Portal
    return commands.Bot(command_prefix=COMMAND_PREFIX, intents=intents)


def setup(bot: commands.Bot, load_inputs):
    @bot.command(name="movers")
    async def movers(ctx):
        await ctx.send(
            embed=render_movers(load_inputs, window_by_id("7d")),
            view=MoversView(load_inputs),
        )
