"""Servers: information, members, bans, roles and permissions."""

from chat_api_docs.document.builder import DocumentBuilder
from chat_api_docs.document.fragments import body, parameter, parameters, ref, success


def register(docs: DocumentBuilder) -> None:
    docs.group("Servers")
    _register_information(docs)
    _register_members(docs)
    _register_permissions(docs)


def _register_information(docs: DocumentBuilder) -> None:
    docs.tag("Server Information", "Query and fetch servers on Revolt")

    server_params = parameters(
        parameter("server", "Server ID", ref("Id")),
    )

    docs.resource("/servers/:server", {
        "get": docs.route_authenticated(
            "Fetch Server",
            "Retrieve a server.",
            server_params,
            success("Retrieved server.", ref("Server")),
        ),
        "patch": docs.route_authenticated(
            "Edit Server",
            "Edit a server object.",
            server_params,
            body("Requested changes to server object.", docs.schema("""
                import type { Category, SystemMessageChannels } from './Servers';
                import type { AutumnId } from './_common';

                interface EditServer {
                    /**
                     * Server name
                     * @minLength 1
                     * @maxLength 32
                     **/
                    name: string;

                    /**
                     * Server description
                     * @minLength 0
                     * @maxLength 1024
                     **/
                    description?: string;

                    icon?: AutumnId;

                    banner?: AutumnId;

                    /**
                     * Server categories
                     */
                    categories?: Category[];

                    /**
                     * System message channels
                     */
                    system_messages?: SystemMessageChannels;

                    /**
                     * Field to remove from server object
                     */
                    remove?: 'Icon' | 'Banner' | 'Description';
                }
            """)),
            success("Succesfully changed server object."),
        ),
        "delete": docs.route_authenticated(
            "Delete / Leave Server",
            "Deletes a server if owner otherwise leaves.",
            server_params,
            success("Deleted Server"),
        ),
    })

    docs.resource("/servers/create", {
        "post": docs.route_authenticated(
            "Create Server",
            "Create a new server.",
            body("Server Data", docs.schema("""
                import { Id, Nonce } from './_common';

                interface ServerData {
                    /**
                     * Group name
                     * @minLength 1
                     * @maxLength 32
                     */
                    name: string;

                    /**
                     * Group description
                     * @minLength 0
                     * @maxLength 1024
                     */
                    description?: string;

                    nonce: Nonce;
                }
            """)),
            success("Server", ref("Server")),
        ),
    })

    docs.resource("/servers/:server/channels", {
        "post": docs.route_authenticated(
            "Create Channel",
            "Create a new Text or Voice channel.",
            server_params,
            body("Channel Data", docs.schema("""
                import { Id, Nonce } from './_common';

                interface ChannelData {
                    /**
                     * Channel type
                     */
                    type: 'Text' | 'Voice';

                    /**
                     * Channel name
                     * @minLength 1
                     * @maxLength 32
                     */
                    name: string;

                    /**
                     * Channel description
                     * @minLength 0
                     * @maxLength 1024
                     */
                    description?: string;

                    nonce: Nonce;
                }
            """)),
            success("Channel", ref("Channel")),
        ),
    })

    docs.resource("/servers/:server/invites", {
        "get": docs.route_authenticated(
            "Fetch Invites",
            "Fetch all server invites.",
            server_params,
            success("Server Invites", docs.schema("""
                import { Id } from './_common';

                type ServerInvites = {
                    /**
                     * Invite Code
                     */
                    code: string;

                    /**
                     * ID of the user who created this invite.
                     */
                    creator: Id;

                    /**
                     * ID of the channel this invite is for.
                     */
                    channel: Id;
                }
            """)),
        ),
    })


def _register_members(docs: DocumentBuilder) -> None:
    docs.tag("Server Members", "Find and edit server members")

    server_params = parameters(
        parameter("server", "Server ID", ref("Id")),
    )
    member_params = parameters(
        parameter("server", "Server ID", ref("Id")),
        parameter("member", "Member ID", ref("Id")),
    )

    docs.resource("/servers/:server/members/:member", {
        "get": docs.route_authenticated(
            "Fetch Member",
            "Retrieve a member.",
            member_params,
            success("Retrieved member.", ref("Member")),
        ),
        "patch": docs.route_authenticated(
            "Edit Member",
            "Edit a member object.",
            member_params,
            body("Requested changes to member object.", docs.schema("""
                import type { AutumnId, Id } from './_common';

                interface EditMember {
                    /**
                     * Member nickname
                     * @minLength 1
                     * @maxLength 32
                     **/
                    nickname: string;

                    avatar?: AutumnId;

                    /**
                     * Array of role IDs
                     */
                    roles?: Id[];

                    /**
                     * Field to remove from member object
                     */
                    remove?: 'Nickname' | 'Avatar';
                }
            """)),
            success("Succesfully changed member object."),
        ),
        "delete": docs.route_authenticated(
            "Kick Member",
            "Removes a member from the server.",
            member_params,
            success("Removed Member"),
        ),
    })

    docs.resource("/servers/:server/members", {
        "get": docs.route(
            "Fetch Members",
            "Fetch all server members.",
            server_params,
            success("Server Members", docs.schema("""
                import { Member } from './Servers';
                import { User } from './Users';

                interface ServerMembers {
                    members: Member[],
                    users: User[]
                }
            """)),
        ),
    })

    docs.resource("/servers/:server/bans/:member", {
        "put": docs.route_authenticated(
            "Ban User",
            "Ban a user by their ID.",
            member_params,
            body("Ban Data", docs.schema("""
                interface BanData {
                    /**
                     * Ban reason
                     * @minLength 1
                     * @maxLength 1024
                     */
                    reason?: string
                }
            """)),
            success("Banned user."),
        ),
        "delete": docs.route_authenticated(
            "Unban User",
            "Removes a user's ban.",
            member_params,
            success("Unbanned user."),
        ),
    })

    docs.resource("/servers/:server/bans", {
        "get": docs.route_authenticated(
            "Fetch Bans",
            "Fetch all bans on server.",
            server_params,
            success("Bans", docs.schema("""
                import { Ban } from './Servers';
                type ServerBans = Ban[];
            """)),
        ),
    })


def _register_permissions(docs: DocumentBuilder) -> None:
    docs.tag("Server Permissions", "Manage permissions for servers")

    server_params = parameters(
        parameter("server", "Server ID", ref("Id")),
    )
    role_params = parameters(
        parameter("server", "Server ID", ref("Id")),
        parameter("role", "Role ID", ref("Id")),
    )

    server_permissions = body("Server Permissions", docs.schema("""
        interface ServerPermissions {
            /**
             * Permission values
             */
            permissions: {
                /**
                 * Server permission
                 */
                server: number,

                /**
                 * Channel permission
                 */
                channel: number
            }
        }
    """))

    docs.resource("/servers/:server/permissions/:role", {
        "put": docs.route_authenticated(
            "Set Role Permission",
            "Sets permissions for the specified role in this server.",
            role_params,
            server_permissions,
            success("Successfully updated permissions."),
        ),
    })

    docs.resource("/servers/:server/permissions/default", {
        "put": docs.route_authenticated(
            "Set Default Permission",
            "Sets permissions for the default role in this server.",
            server_params,
            server_permissions,
            success("Successfully updated permissions."),
        ),
    })

    docs.resource("/servers/:server/roles", {
        "post": docs.route_authenticated(
            "Create Role",
            "Creates a new server role.",
            server_params,
            body("Role Data", docs.schema("""
                interface RoleData {
                    /**
                     * Role name
                     * @minLength 1
                     * @maxLength 32
                     */
                    name: string;
                }
            """)),
            success("New Role", docs.schema("""
                import { Id } from './_common';
                import { PermissionTuple } from './Servers';

                interface NewRole {
                    /**
                     * Role ID
                     */
                    id: Id;

                    permissions: PermissionTuple;
                }
            """)),
        ),
    })

    docs.resource("/servers/:server/roles/:role", {
        "delete": docs.route_authenticated(
            "Delete Role",
            "Deletes a server role by ID.",
            role_params,
            success("Successfully deleted role."),
        ),
    })
