"""Shared component schemas referenced by the route sections."""

from chat_api_docs.document.builder import DocumentBuilder


def register(docs: DocumentBuilder) -> None:
    docs.schema("""
        /**
         * Unique ULID identifier
         * @pattern ^[0-9A-HJKMNP-TV-Z]{26}$
         */
        type Id = string;
    """)

    docs.schema("""
        /**
         * Client-generated value used to de-duplicate requests
         * @maxLength 36
         */
        type Nonce = string;
    """)

    docs.schema("""
        /**
         * Identifier of a file uploaded to the file server
         * @minLength 1
         * @maxLength 128
         */
        type AutumnId = string;
    """)

    docs.schema("""
        /**
         * Server and channel permission bitfields
         * @minItems 2
         * @maxItems 2
         */
        type PermissionTuple = number[];
    """)

    docs.schema("""
        interface Attachment {
            _id: string;
            tag: 'attachments' | 'avatars' | 'backgrounds' | 'banners' | 'icons';
            filename: string;
            content_type: string;
            size: number;
        }
    """)

    docs.schema("""
        import type { Id } from './_common';

        interface Category {
            /**
             * Category identifier
             * @minLength 1
             * @maxLength 32
             */
            id: string;

            /**
             * Category title
             * @minLength 1
             * @maxLength 32
             */
            title: string;

            channels: Id[];
        }
    """)

    docs.schema("""
        import type { Id } from './_common';

        interface SystemMessageChannels {
            user_joined?: Id;
            user_left?: Id;
            user_kicked?: Id;
            user_banned?: Id;
        }
    """)

    docs.schema("""
        interface Role {
            /**
             * Role name
             * @minLength 1
             * @maxLength 32
             */
            name: string;

            permissions: PermissionTuple;

            /**
             * CSS colour of the role
             */
            colour?: string;
        }
    """)

    docs.schema("""
        import type { Id, Nonce } from './_common';

        interface Server {
            _id: Id;
            nonce?: Nonce;

            /**
             * User ID of the owner
             */
            owner: Id;

            /**
             * @minLength 1
             * @maxLength 32
             */
            name: string;

            /**
             * @maxLength 1024
             */
            description?: string;

            channels: Id[];
            categories?: Category[];
            system_messages?: SystemMessageChannels;
            roles?: Record<string, Role>;
            default_permissions: PermissionTuple;
            icon?: Attachment;
            banner?: Attachment;
        }
    """)

    docs.schema("""
        interface Member {
            /**
             * Composite key of server and user
             */
            _id: {
                server: Id,
                user: Id
            };

            /**
             * @minLength 1
             * @maxLength 32
             */
            nickname?: string;

            avatar?: Attachment;
            roles?: Id[];
        }
    """)

    docs.schema("""
        interface Ban {
            _id: {
                server: Id,
                user: Id
            };

            /**
             * @minLength 1
             * @maxLength 1024
             */
            reason?: string;
        }
    """)

    docs.schema("""
        interface Channel {
            _id: Id;
            channel_type: 'TextChannel' | 'VoiceChannel';
            server: Id;
            nonce?: Nonce;

            /**
             * @minLength 1
             * @maxLength 32
             */
            name: string;

            /**
             * @maxLength 1024
             */
            description?: string;

            icon?: Attachment;
        }
    """)

    docs.schema("""
        interface User {
            _id: Id;

            /**
             * @minLength 2
             * @maxLength 32
             * @pattern ^[a-zA-Z0-9_.]+$
             */
            username: string;

            avatar?: Attachment;
            online?: boolean;
        }
    """)
