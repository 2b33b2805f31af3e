from postman_publisher.collection.models import Auth, Collection, Folder, Info, KeyValue, RequestItem


class TestCollectionModel:
    def test_parse_folders_and_requests(self):
        collection = Collection.from_dict({
            "info": {"name": "Demo", "schema": "https://schema.getpostman.com/json/collection/v2.1.0/collection.json"},
            "item": [
                {"name": "Users", "item": [
                    {"name": "List users", "request": {"method": "GET", "url": "{{baseUrl}}/users"}},
                ]},
                {"name": "Ping", "request": {"method": "GET", "url": "{{baseUrl}}/ping"}},
            ],
            "variable": [{"key": "baseUrl", "value": "https://api.example.com"}],
        })

        assert isinstance(collection.info, Info)
        assert collection.info.name == "Demo"
        assert isinstance(collection.item[0], Folder)
        assert isinstance(collection.item[0].item[0], RequestItem)
        assert isinstance(collection.item[1], RequestItem)
        assert isinstance(collection.variable[0], KeyValue)

    def test_unknown_keys_preserved(self):
        data = {
            "info": {"name": "Demo", "description": "text"},
            "item": [{
                "name": "Ping",
                "request": {"method": "GET", "url": {"raw": "{{baseUrl}}/ping", "host": ["{{baseUrl}}"]}},
                "response": [],
                "protocolProfileBehavior": {"disableBodyPruning": True},
            }],
            "event": [{"listen": "prerequest"}],
        }

        assert Collection.from_dict(data).to_dict() == data

    def test_dump_does_not_invent_fields(self):
        data = {"info": {"name": "Demo"}, "item": [{"name": "Empty", "item": []}]}
        assert Collection.from_dict(data).to_dict() == data

    def test_explicit_nulls_preserved(self):
        data = {
            "info": {"name": "Demo", "description": None},
            "item": [{"name": "Ping", "auth": None, "request": {"method": "GET", "body": None}}],
            "variable": [{"key": "token", "value": None}],
        }
        assert Collection.from_dict(data).to_dict() == data

    def test_assigned_fields_dumped(self):
        collection = Collection.from_dict({"item": []})
        collection.info = Info()
        collection.info.name = "Stamped"
        collection.item.append(Folder(name="Auth", item=[]))

        assert collection.to_dict() == {"info": {"name": "Stamped"}, "item": [{"name": "Auth", "item": []}]}

    def test_auth_descriptor(self):
        collection = Collection.from_dict({"item": [{
            "name": "Secured",
            "request": {
                "method": "GET",
                "auth": {"type": "oauth2", "oauth2": [{"key": "scope", "value": "read", "type": "string"}]},
            },
        }]})

        auth = collection.item[0].request.auth
        assert isinstance(auth, Auth)
        assert auth.fields_for("oauth2")[0].key == "scope"
        assert auth.fields_for("bearer") is None

    def test_wrong_shapes_fall_back_to_raw(self):
        collection = Collection.from_dict({
            "info": "just a string",
            "item": [{"name": "odd", "request": {"method": "GET", "auth": "inherit"}}],
            "variable": "none",
        })

        assert collection.info == "just a string"
        assert collection.item[0].request.auth == "inherit"
        assert collection.variable == "none"
