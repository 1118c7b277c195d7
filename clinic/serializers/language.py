from rest_framework import serializers


class LanguageChoiceSerializer(serializers.Serializer):
    code = serializers.CharField()
    name = serializers.CharField()
    flag = serializers.CharField()
    selected = serializers.BooleanField()


class LanguageUpdateSerializer(serializers.Serializer):
    # Membership is checked by the language store, which raises InvalidLanguage
    language = serializers.CharField(trim_whitespace=False)
