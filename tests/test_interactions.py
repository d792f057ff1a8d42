import discord
import pretend
import pytest

import cogs.interactions
from cogs.commands.register import confirmation_view
from cogs.interactions import NOT_YOUR_BUTTON, Interactions

REQUESTER = 1000
STRANGER = 2000
GUILD = 42


class FakeResponse:
    def __init__(self):
        self.deferred = False
        self.sent = []
        self.edited = []

    def is_done(self):
        return self.deferred

    async def defer(self, **kwargs):
        self.deferred = True

    async def send_message(self, **kwargs):
        self.sent.append(kwargs)

    async def edit_message(self, **kwargs):
        self.edited.append(kwargs)


def make_interaction(user_id, custom_id):
    followups = []

    async def send(**kwargs):
        followups.append(kwargs)

    async def edit_original_response(**kwargs):
        pass

    return pretend.stub(
        type=discord.InteractionType.component,
        data={"custom_id": custom_id},
        user=pretend.stub(id=user_id),
        guild=None,
        response=FakeResponse(),
        followup=pretend.stub(send=send),
        followups=followups,
        edit_original_response=edit_original_response,
    )


@pytest.fixture
def linked(monkeypatch):
    calls = []

    async def confirm_link(interaction, username, guild):
        calls.append((interaction.user.id, username, guild))
        return f"Successfully linked your account to **{username}**!"

    monkeypatch.setattr(cogs.interactions, "confirm_link", confirm_link)
    return calls


@pytest.fixture
def interactions():
    guild = pretend.stub(id=GUILD)
    bot = pretend.stub(get_guild=lambda guild_id: guild if guild_id == GUILD else None)
    return Interactions(bot)


@pytest.mark.asyncio
async def test_confirmation_buttons_carry_requester():
    view = confirmation_view("Zezima", REQUESTER, GUILD)

    assert [item.custom_id for item in view.children] == [
        f"confirm-rsn:Zezima,{REQUESTER},{GUILD}",
        f"cancel-rsn:Zezima,{REQUESTER}",
    ]


@pytest.mark.asyncio
async def test_requester_can_confirm(interactions, linked):
    interaction = make_interaction(REQUESTER, f"confirm-rsn:Zezima,{REQUESTER},{GUILD}")

    await interactions.on_interaction(interaction)

    assert linked == [(REQUESTER, "Zezima", interactions.bot.get_guild(GUILD))]
    assert len(interaction.followups) == 1


@pytest.mark.asyncio
async def test_stranger_cannot_confirm(interactions, linked):
    interaction = make_interaction(STRANGER, f"confirm-rsn:Zezima,{REQUESTER},{GUILD}")

    await interactions.on_interaction(interaction)

    assert linked == []
    [reply] = interaction.response.sent
    assert reply["embed"].description == NOT_YOUR_BUTTON
    assert reply["ephemeral"]


@pytest.mark.asyncio
async def test_stranger_cannot_cancel(interactions):
    interaction = make_interaction(STRANGER, f"cancel-rsn:Zezima,{REQUESTER}")

    await interactions.on_interaction(interaction)

    assert interaction.response.edited == []
    assert interaction.response.sent[0]["embed"].description == NOT_YOUR_BUTTON


@pytest.mark.asyncio
async def test_requester_can_cancel(interactions):
    interaction = make_interaction(REQUESTER, f"cancel-rsn:Zezima,{REQUESTER}")

    await interactions.on_interaction(interaction)

    assert interaction.response.edited[0]["view"] is None


@pytest.mark.asyncio
async def test_button_without_requester_is_rejected(interactions, linked):
    interaction = make_interaction(REQUESTER, "confirm-rsn:Zezima")

    await interactions.on_interaction(interaction)

    assert linked == []
    assert interaction.response.sent[0]["embed"].description == "Invalid button, sorry!"
